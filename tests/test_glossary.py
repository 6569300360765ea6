from textquiz.glossary import GlossaryManager


def test_load_all_reads_csv_files(tmp_path):
    (tmp_path / "biology.csv").write_text(
        "word,translation\nPlant,植物\nwater,水\n", encoding="utf-8"
    )
    (tmp_path / "broken.csv").write_text("term,meaning\nx,y\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    manager = GlossaryManager(str(tmp_path))
    manager.load_all()

    assert len(manager) == 2
    assert manager.lookup("plant") == "植物"
    assert manager.lookup(" WATER ") == "水"
    assert manager.lookup("tree") is None
    assert manager.translations() == sorted(["植物", "水"])


def test_rows_with_missing_values_are_skipped(tmp_path):
    (tmp_path / "partial.csv").write_text(
        "word,translation\nsun,太陽\nmoon,\n", encoding="utf-8"
    )
    manager = GlossaryManager(str(tmp_path))
    manager.load_all()
    assert manager.lookup("sun") == "太陽"
    assert manager.lookup("moon") is None


def test_missing_directory_leaves_glossary_empty(tmp_path):
    manager = GlossaryManager(str(tmp_path / "nowhere"))
    manager.add("stale", "entry")
    manager.load_all()
    assert len(manager) == 0

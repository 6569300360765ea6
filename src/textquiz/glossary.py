import glob
import logging
import os
from typing import Dict, List, Optional

import pandas as pd

logger = logging.getLogger("textquiz.glossary")


class GlossaryManager:
    """Loads word/translation pairs used by the offline quiz generator."""

    def __init__(self, directory: str):
        self.directory = directory
        self.entries: Dict[str, str] = {}

    def load_all(self):
        self.entries = {}
        if not os.path.isdir(self.directory):
            logger.warning(f"Glossary directory {self.directory} not found.")
            return

        csv_files = sorted(glob.glob(os.path.join(self.directory, "*.csv")))
        for file_path in csv_files:
            file_name = os.path.splitext(os.path.basename(file_path))[0]
            try:
                df = pd.read_csv(file_path, encoding="utf-8")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load {file_path}: {e}")
                continue
            if "word" not in df.columns or "translation" not in df.columns:
                logger.error(f"Skipping {file_name}: Missing columns.")
                continue
            df = df.dropna(subset=["word", "translation"])
            for row in df.to_dict("records"):
                self.add(str(row["word"]), str(row["translation"]))
            logger.info(f"Loaded {len(df)} glossary entries from {file_name}")

    def add(self, word: str, translation: str):
        self.entries[word.strip().lower()] = translation.strip()

    def lookup(self, word: str) -> Optional[str]:
        return self.entries.get(word.strip().lower())

    def translations(self) -> List[str]:
        return sorted(set(self.entries.values()))

    def __len__(self) -> int:
        return len(self.entries)

import os
import tempfile

# Settings are read at import time.
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "textquiz-test-log")
os.environ["TEXTQUIZ_BACKEND"] = "offline"

import httpx
import pytest

from textquiz.backends import GeminiClient
from textquiz.glossary import GlossaryManager

STUDY_TEXT = (
    "Plants use sunlight to make energy. "
    "This process is called photosynthesis. "
    "Water and carbon dioxide become sugar and oxygen.\n"
    "The leaves of the plant capture sunlight."
)


def gemini_reply(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def make_gemini():
    def factory(handler):
        return GeminiClient(
            api_key="test-key",
            model="gemini-test",
            base_url="https://gemini.test/v1beta",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

    return factory


@pytest.fixture
def glossary():
    manager = GlossaryManager("unused")
    manager.add("sunlight", "日光")
    manager.add("energy", "エネルギー")
    manager.add("plant", "植物")
    manager.add("water", "水")
    manager.add("oxygen", "酸素")
    return manager

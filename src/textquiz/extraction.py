import base64
import logging
from abc import ABC, abstractmethod
from typing import Tuple

import httpx

from .backends import GeminiClient, image_part, text_part
from .errors import BackendUnavailable, InvalidInput

logger = logging.getLogger("textquiz.extraction")

EXTRACTION_PROMPT = (
    "Read the contents of this textbook page in detail. Extract all text, "
    "figures, tables and formulas in the image. Output Japanese text as "
    "Japanese and English text as English."
)


def parse_data_url(url: str) -> Tuple[str, str]:
    """Split ``data:<mime>;base64,<payload>`` into its mime type and payload."""
    header, sep, data = url.partition(",")
    if not sep or not header.startswith("data:") or not data:
        raise InvalidInput("Malformed data URL")
    mime_type = header[len("data:"):].split(";")[0]
    if not mime_type:
        raise InvalidInput("Data URL has no mime type")
    return mime_type, data


async def load_image(url: str, client: httpx.AsyncClient, max_bytes: int) -> Tuple[str, str]:
    """Return ``(mime_type, base64_data)`` for a data URL or a remote image URL."""
    if url.startswith("data:"):
        mime_type, data = parse_data_url(url)
        if len(data) * 3 // 4 > max_bytes:
            raise InvalidInput("Image is too large")
        return mime_type, data

    if not url.startswith(("http://", "https://")):
        raise InvalidInput("imageUrl must be a data URL or an http(s) URL")

    content = bytearray()
    try:
        async with client.stream("GET", url, follow_redirects=True) as resp:
            if resp.status_code >= 400:
                raise InvalidInput(f"Could not fetch image: HTTP {resp.status_code}")
            declared = resp.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                raise InvalidInput("Image is too large")
            async for chunk in resp.aiter_bytes():
                content.extend(chunk)
                if len(content) > max_bytes:
                    raise InvalidInput("Image is too large")
            mime_type = resp.headers.get("content-type", "image/png").split(";")[0].strip()
    except httpx.HTTPError as e:
        raise InvalidInput(f"Could not fetch image: {e}") from e

    logger.info(f"Fetched {len(content)} bytes of {mime_type} from {url}")
    return mime_type, base64.b64encode(bytes(content)).decode("ascii")


class TextExtractor(ABC):
    """Turns an image of study material into plain text."""

    @abstractmethod
    async def extract(self, image_url: str) -> str:
        pass


class GeminiTextExtractor(TextExtractor):
    def __init__(self, gemini: GeminiClient, http: httpx.AsyncClient, max_bytes: int):
        self.gemini = gemini
        self.http = http
        self.max_bytes = max_bytes

    async def extract(self, image_url: str) -> str:
        mime_type, data = await load_image(image_url, self.http, self.max_bytes)
        return await self.gemini.generate(
            [text_part(EXTRACTION_PROMPT), image_part(mime_type, data)]
        )


class OfflineTextExtractor(TextExtractor):
    async def extract(self, image_url: str) -> str:
        raise BackendUnavailable(
            "Image text extraction needs a Gemini API key. "
            "Run OCR in the browser or paste the text instead."
        )

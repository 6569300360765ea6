import json
import re
from typing import Any, Dict, List, Optional

import httpx

from ..errors import BackendError

_FENCE_RE = re.compile(r"```(?:json)?\n?")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def text_part(text: str) -> Dict[str, Any]:
    return {"text": text}


def image_part(mime_type: str, data: str) -> Dict[str, Any]:
    return {"inline_data": {"mime_type": mime_type, "data": data}}


def extract_json(text: str) -> Dict[str, Any]:
    """Pull the outermost JSON object out of a model reply, ignoring code fences."""
    cleaned = _FENCE_RE.sub("", text)
    match = _OBJECT_RE.search(cleaned)
    if not match:
        raise BackendError("Model reply did not contain JSON", details=text[:2000])
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise BackendError("Model reply was not valid JSON", details=str(e)) from e


class GeminiClient:
    """
    Minimal wrapper around the Gemini ``generateContent`` endpoint.

    Only sends requests and unpacks the first text candidate. Prompts and
    the meaning of the replies belong to the callers.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str,
        client: httpx.AsyncClient,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._client = client

    @property
    def model(self) -> str:
        return self._model

    async def generate(self, parts: List[Dict[str, Any]]) -> str:
        url = f"{self._base_url}/models/{self._model}:generateContent"
        payload = {"contents": [{"parts": parts}]}
        try:
            resp = await self._client.post(
                url,
                params={"key": self._api_key},
                headers={"Content-Type": "application/json"},
                json=payload,
            )
        except httpx.HTTPError as e:
            raise BackendError("Gemini request failed", details=str(e)) from e

        if resp.status_code >= 400:
            raise BackendError(
                f"Gemini request failed: {resp.status_code}", details=resp.text[:2000]
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise BackendError("Gemini reply was not JSON", details=resp.text[:2000]) from e
        text = self._first_text(data)
        if text is None:
            raise BackendError(
                "Gemini reply had no text candidate",
                details=json.dumps(data, ensure_ascii=False)[:2000],
            )
        return text

    async def generate_json(self, parts: List[Dict[str, Any]]) -> Dict[str, Any]:
        return extract_json(await self.generate(parts))

    @staticmethod
    def _first_text(data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        candidates = data.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            return None
        if not isinstance(candidates[0], dict):
            return None
        content = candidates[0].get("content")
        if not isinstance(content, dict):
            return None
        parts = content.get("parts") or []
        if not isinstance(parts, list):
            return None
        if parts and isinstance(parts[0], dict) and isinstance(parts[0].get("text"), str):
            return parts[0]["text"]
        return None

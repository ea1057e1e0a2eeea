"""
Thin async client for the Gemini ``generateContent`` REST endpoint.

Routes depend on :func:`get_text_generator`, so tests and alternative
backends can swap the client through ``app.dependency_overrides``.
"""

import logging
import re
from typing import Any

import httpx
import orjson

from rallypoint.config import settings

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class GenerativeTextError(Exception):
    pass


def parse_json_reply(text: str) -> Any:
    """Decode a model reply that should be JSON, tolerating markdown fences."""
    cleaned = _FENCE.sub("", text).strip()
    try:
        return orjson.loads(cleaned)
    except orjson.JSONDecodeError as e:
        raise GenerativeTextError("Model reply is not valid JSON") from e


class GenerativeTextClient:
    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerativeTextError("Generative text API key is not configured")

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    headers={"x-goog-api-key": self.api_key},
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Generative text request failed: {e}")
            raise GenerativeTextError("Generative text request failed") from e

        try:
            parts = response.json()["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerativeTextError("Unexpected generative text response") from e
        if not text.strip():
            raise GenerativeTextError("Empty generative text response")
        return text

    async def generate_json(self, prompt: str) -> Any:
        return parse_json_reply(await self.generate(prompt))

    async def classify(self, prompt: str) -> list[str]:
        tags = await self.generate_json(prompt)
        if not isinstance(tags, list):
            raise GenerativeTextError("Expected a JSON array of tags")
        return [str(tag).strip() for tag in tags if str(tag).strip()]


text_generator = GenerativeTextClient(
    api_key=settings.GEMINI_API_KEY,
    model=settings.GEMINI_MODEL,
    base_url=settings.GEMINI_BASE_URL,
    timeout=settings.AI_TIMEOUT_SECONDS,
)


def get_text_generator() -> GenerativeTextClient:
    return text_generator

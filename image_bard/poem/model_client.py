"""Client for poem generation via the configured LLM provider."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from openai import AsyncOpenAI

from image_bard.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class PoemModelClient:
    """Thin client that talks to an OpenAI-compatible chat completions endpoint."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        if not settings.llm_api_key:
            raise RuntimeError("LLM API key is not configured.")

        self._settings = settings
        self._client = AsyncOpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url.rstrip("/"),
            timeout=settings.poem_model_timeout,
            max_retries=0,
        )

    async def complete(self, messages: Sequence[dict[str, Any]]) -> str:
        """Send the prompt once and return the raw JSON text produced by the model."""

        response = await self._client.chat.completions.create(
            model=self._settings.poem_model,
            messages=list(messages),
            max_tokens=self._settings.poem_max_tokens,
            response_format={"type": "json_object"},
        )
        if not response.choices:
            logger.warning("Poem model returned no choices.")
            return ""
        return response.choices[0].message.content or ""

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        models = await self._client.models.list()
        return bool(models.data)

    async def close(self) -> None:
        """Release HTTP resources."""

        await self._client.close()

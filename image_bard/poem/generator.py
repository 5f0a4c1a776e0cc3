"""Poem generation from a canonical image payload."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Protocol, Sequence

from openai import OpenAIError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from image_bard.errors import GenerationError, ImageBardError
from image_bard.imgproc.models import CanonicalImage
from image_bard.metrics.prometheus_exporter import poem_generations_total
from image_bard.poem.model_client import PoemModelClient
from image_bard.poem.prompt_builder import PoemPromptBuilder

logger = logging.getLogger(__name__)


class PoemRequest(BaseModel):
    """Input of the poem flow: an image as a base64 data URI."""

    model_config = ConfigDict(populate_by_name=True)

    photo_data_uri: str = Field(
        alias="photoDataUri",
        description=(
            "A photo to generate a poem from, as a data URI that must include a MIME type "
            "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )

    @field_validator("photo_data_uri")
    @classmethod
    def _check_data_uri(cls, value: str) -> str:
        CanonicalImage.from_data_uri(value)
        return value

    @property
    def image(self) -> CanonicalImage:
        return CanonicalImage.from_data_uri(self.photo_data_uri)


class PoemResponse(BaseModel):
    """Structured response returned by the poem model."""

    poem: str = Field(min_length=1, description="A poem generated from the image.")

    @field_validator("poem")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("poem must not be blank")
        return value


class PoemModel(Protocol):
    async def complete(self, messages: Sequence[dict[str, Any]]) -> str: ...


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


class PoemGenerator:
    """Shapes the prompt, calls the model once and validates what comes back.

    The generator keeps no per-request state, so a single instance can serve
    any number of concurrent calls.
    """

    def __init__(
        self,
        client: PoemModel | None = None,
        prompt_builder: PoemPromptBuilder | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._prompt_builder = prompt_builder or PoemPromptBuilder()

    def _get_client(self) -> PoemModel:
        if self._client is None:
            try:
                self._client = PoemModelClient()
            except RuntimeError as exc:
                raise GenerationError(str(exc)) from exc
        return self._client

    async def generate_poem(self, request: PoemRequest | Mapping[str, Any]) -> PoemResponse:
        """Generate a poem for ``request`` or raise :class:`GenerationError`."""

        if not isinstance(request, PoemRequest):
            try:
                request = PoemRequest.model_validate(request)
            except ValidationError as exc:
                poem_generations_total.labels(outcome="invalid_request").inc()
                raise GenerationError(f"Invalid poem request: {_first_error(exc)}") from exc

        messages = self._prompt_builder.build(request.image)
        client = self._get_client()
        try:
            content = await client.complete(messages)
        except OpenAIError as exc:
            logger.error("Poem model invocation failed: %s", exc)
            poem_generations_total.labels(outcome="model_error").inc()
            raise GenerationError(f"Poem model request failed: {exc}") from exc
        except ImageBardError:
            poem_generations_total.labels(outcome="model_error").inc()
            raise
        except Exception as exc:
            logger.exception("Unexpected error from the poem model client.")
            poem_generations_total.labels(outcome="model_error").inc()
            raise GenerationError(f"Poem model request failed: {exc!r}") from exc

        try:
            payload = json.loads(content)
            response = PoemResponse.model_validate(payload)
        except (json.JSONDecodeError, TypeError) as exc:
            logger.warning("Poem model returned non-JSON output: %.200s", content)
            poem_generations_total.labels(outcome="invalid_response").inc()
            raise GenerationError("Poem model returned a response that is not valid JSON.") from exc
        except ValidationError as exc:
            logger.warning("Poem model output failed validation: %.200s", content)
            poem_generations_total.labels(outcome="invalid_response").inc()
            raise GenerationError(f"Poem model returned no poem: {_first_error(exc)}") from exc

        poem_generations_total.labels(outcome="success").inc()
        return response

    async def close(self) -> None:
        """Close the model client if this generator created it."""

        if self._owns_client and isinstance(self._client, PoemModelClient):
            await self._client.close()
            self._client = None


async def generate_poem(request: PoemRequest | Mapping[str, Any]) -> PoemResponse:
    """Run one poem request against a freshly configured model client."""

    generator = PoemGenerator()
    try:
        return await generator.generate_poem(request)
    finally:
        await generator.close()

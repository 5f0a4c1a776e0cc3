"""Prompt construction helpers for the poem generation step."""

from __future__ import annotations

from typing import Any

from image_bard.imgproc.models import CanonicalImage

MEDIA_PLACEHOLDER = "{{media}}"

POEM_PROMPT_TEMPLATE = (
    "You are a poet, and will generate a poem based on the image provided.\n\n"
    "Generate a poem inspired by the image. Consider the themes, objects, "
    "and emotions present in the image.\n\n"
    'Reply with a JSON object of the form {"poem": "<your poem>"} and nothing else.\n\n'
    "Image: " + MEDIA_PLACEHOLDER
)


class PoemPromptBuilder:
    """Builds the single-turn chat prompt that carries the image inline."""

    def __init__(self, template: str = POEM_PROMPT_TEMPLATE) -> None:
        if template.count(MEDIA_PLACEHOLDER) != 1:
            raise ValueError(f"Prompt template must contain exactly one {MEDIA_PLACEHOLDER} marker.")
        self._before, self._after = template.split(MEDIA_PLACEHOLDER)

    def build(self, image: CanonicalImage) -> list[dict[str, Any]]:
        """Return chat messages with the image embedded where the template asks for it."""

        parts: list[dict[str, Any]] = []
        if self._before.strip():
            parts.append({"type": "text", "text": self._before.rstrip()})
        parts.append({"type": "image_url", "image_url": {"url": image.data_uri}})
        if self._after.strip():
            parts.append({"type": "text", "text": self._after.strip()})
        return [{"role": "user", "content": parts}]

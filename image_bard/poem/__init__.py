"""Prompt building and poem generation utilities."""

from .generator import PoemGenerator, PoemRequest, PoemResponse, generate_poem
from .model_client import PoemModelClient
from .prompt_builder import PoemPromptBuilder

__all__ = [
    "PoemGenerator",
    "PoemModelClient",
    "PoemPromptBuilder",
    "PoemRequest",
    "PoemResponse",
    "generate_poem",
]

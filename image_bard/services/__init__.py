"""Caller-facing orchestration."""

from .session import GenerationCounter, ImageBardSession, SessionState

__all__ = ["GenerationCounter", "ImageBardSession", "SessionState"]

"""Logging setup for the API, the scripts and the tests."""

from __future__ import annotations

import logging

from image_bard.config.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# httpx and the OpenAI SDK log every request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(level: str | None = None) -> int:
    """Configure the root logger and return the level that was applied."""

    name = (level or get_settings().log_level).upper()
    resolved = getattr(logging, name, logging.INFO)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(resolved, logging.WARNING))
    return resolved

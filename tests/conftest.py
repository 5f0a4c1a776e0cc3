"""Shared fixtures for the test-suite."""

from __future__ import annotations

import random
from io import BytesIO

import pytest
from PIL import Image

from image_bard.config.settings import get_settings


@pytest.fixture(autouse=True)
def _setup_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LLM_API_KEY", "test-key")
    monkeypatch.setenv("LLM_BASE_URL", "https://llm.test/v1")
    monkeypatch.setenv("IMAGE_FETCH_TIMEOUT", "2")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _noise_image(fmt: str, size: tuple[int, int] = (24, 24)) -> bytes:
    rng = random.Random(1234)
    pixels = bytes(rng.randrange(256) for _ in range(size[0] * size[1] * 3))
    image = Image.frombytes("RGB", size, pixels)
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture(scope="session")
def png_bytes() -> bytes:
    """A small noisy PNG, roughly 2 KiB."""

    return _noise_image("PNG")


@pytest.fixture(scope="session")
def gif_bytes() -> bytes:
    return _noise_image("GIF")

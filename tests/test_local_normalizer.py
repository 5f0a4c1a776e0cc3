"""Tests for local file validation and encoding."""

from __future__ import annotations

from pathlib import Path

import pytest

from image_bard.imgproc import ImageNormalizer, LocalFile, normalize_local_file
from image_bard.imgproc.normalize import (
    LOCAL_SIZE_MESSAGE,
    LOCAL_TYPE_MESSAGE,
    MAX_LOCAL_IMAGE_BYTES,
    MISSING_FILE_MESSAGE,
)


def test_png_is_encoded_without_loss(png_bytes: bytes) -> None:
    result = normalize_local_file(png_bytes, "image/png", len(png_bytes))

    assert result.success
    assert result.error_message is None
    assert result.canonical_image.mime_type == "image/png"
    assert result.canonical_image.decode() == png_bytes
    assert result.data_url.startswith("data:image/png;base64,")


def test_missing_file_is_rejected() -> None:
    result = normalize_local_file(None, "image/png", 0)

    assert not result.success
    assert result.error_message == MISSING_FILE_MESSAGE
    assert result.error_kind == "validation"


@pytest.mark.parametrize("mime_type", ["image/png", "application/pdf", ""])
def test_oversize_file_fails_on_size_whatever_the_type(mime_type: str) -> None:
    result = normalize_local_file(b"x", mime_type, MAX_LOCAL_IMAGE_BYTES + 1)

    assert not result.success
    assert result.error_message == LOCAL_SIZE_MESSAGE


def test_file_at_the_limit_is_accepted() -> None:
    data = b"\x00" * MAX_LOCAL_IMAGE_BYTES
    result = normalize_local_file(data, "image/jpeg", len(data))

    assert result.success


@pytest.mark.parametrize("mime_type", ["image/svg+xml", "image/bmp", "text/html", None])
def test_type_outside_enumeration_is_rejected(png_bytes: bytes, mime_type: str | None) -> None:
    result = normalize_local_file(png_bytes, mime_type, len(png_bytes))

    assert not result.success
    assert result.error_message == LOCAL_TYPE_MESSAGE
    assert result.canonical_image is None


def test_declared_type_is_trusted_over_content(png_bytes: bytes) -> None:
    result = normalize_local_file(png_bytes, "image/webp", len(png_bytes))

    assert result.canonical_image.mime_type == "image/webp"


def test_same_bytes_produce_identical_payloads(gif_bytes: bytes) -> None:
    first = normalize_local_file(gif_bytes, "image/gif", len(gif_bytes))
    second = normalize_local_file(gif_bytes, "image/gif", len(gif_bytes))

    assert first.data_url == second.data_url
    assert first == second


@pytest.mark.asyncio
async def test_local_file_from_path_guesses_mime_type(tmp_path: Path, png_bytes: bytes) -> None:
    path = tmp_path / "photo.png"
    path.write_bytes(png_bytes)

    source = await LocalFile.from_path(path)
    result = ImageNormalizer().normalize_local(source)

    assert source.byte_size == len(png_bytes)
    assert result.success
    assert result.canonical_image.mime_type == "image/png"


@pytest.mark.asyncio
async def test_normalize_dispatches_local_sources(png_bytes: bytes) -> None:
    source = LocalFile(data=png_bytes, declared_mime_type="image/png", byte_size=len(png_bytes))

    result = await ImageNormalizer().normalize(source)

    assert result.success

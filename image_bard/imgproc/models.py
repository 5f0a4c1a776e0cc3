"""Value objects describing image sources and their canonical payload."""

from __future__ import annotations

import asyncio
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Union

MIME_TYPE_GRAMMAR = r"image/[A-Za-z0-9.+_-]+"
MIME_TYPE_PATTERN = re.compile(rf"^{MIME_TYPE_GRAMMAR}$")
DATA_URI_PATTERN = re.compile(
    rf"^data:(?P<mime>{MIME_TYPE_GRAMMAR});base64,(?P<body>[A-Za-z0-9+/]+={{0,2}})$"
)

ErrorKind = Literal["validation", "fetch"]


@dataclass(frozen=True, slots=True)
class LocalFile:
    """A file picked by the user, described by what the client declared about it."""

    data: bytes | None
    declared_mime_type: str
    byte_size: int

    @classmethod
    async def from_path(cls, path: Path, declared_mime_type: str | None = None) -> "LocalFile":
        """Read ``path`` without blocking the event loop."""

        data = await asyncio.to_thread(path.read_bytes)
        if declared_mime_type is None:
            declared_mime_type = mimetypes.guess_type(path.name)[0] or ""
        return cls(data=data, declared_mime_type=declared_mime_type, byte_size=len(data))


@dataclass(frozen=True, slots=True)
class RemoteUrl:
    """An image the user pointed at by URL."""

    url: str


ImageSource = Union[LocalFile, RemoteUrl]


@dataclass(frozen=True, slots=True)
class CanonicalImage:
    """MIME type plus base64 body, the only image shape the pipeline passes around."""

    mime_type: str
    base64_body: str

    def __post_init__(self) -> None:
        if not MIME_TYPE_PATTERN.match(self.mime_type):
            raise ValueError(f"Canonical images must have a plain image/* MIME type, got {self.mime_type!r}.")

    @classmethod
    def from_bytes(cls, mime_type: str, data: bytes) -> "CanonicalImage":
        return cls(mime_type=mime_type, base64_body=base64.b64encode(data).decode("ascii"))

    @classmethod
    def from_data_uri(cls, data_uri: str) -> "CanonicalImage":
        """Parse ``data:<mime>;base64,<body>``; any other encoding is rejected."""

        match = DATA_URI_PATTERN.match(data_uri)
        if match is None:
            raise ValueError("Expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'.")
        body = match.group("body")
        try:
            base64.b64decode(body, validate=True)
        except (ValueError, binascii.Error) as exc:
            raise ValueError("Data URI body is not valid base64.") from exc
        return cls(mime_type=match.group("mime"), base64_body=body)

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.base64_body}"

    @property
    def decoded_size(self) -> int:
        padding = len(self.base64_body) - len(self.base64_body.rstrip("="))
        return len(self.base64_body) * 3 // 4 - padding

    def decode(self) -> bytes:
        return base64.b64decode(self.base64_body)


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Outcome of a normalisation attempt: either an image or an error message."""

    success: bool
    canonical_image: CanonicalImage | None = None
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    def __post_init__(self) -> None:
        if self.success and (self.canonical_image is None or self.error_message is not None):
            raise ValueError("Successful results carry an image and no error message.")
        if not self.success and (self.canonical_image is not None or not self.error_message):
            raise ValueError("Failed results carry an error message and no image.")

    @classmethod
    def ok(cls, image: CanonicalImage) -> "ConversionResult":
        return cls(success=True, canonical_image=image)

    @classmethod
    def fail(cls, message: str, kind: ErrorKind) -> "ConversionResult":
        return cls(success=False, error_message=message, error_kind=kind)

    @property
    def data_url(self) -> str | None:
        return self.canonical_image.data_uri if self.canonical_image else None

    def as_payload(self) -> dict[str, object]:
        """Serialise into the ``{success, dataUrl, error}`` shape used by the HTTP API."""

        return {"success": self.success, "dataUrl": self.data_url, "error": self.error_message}

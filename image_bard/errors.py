"""Exception hierarchy shared by the normaliser and the poem generator."""

from __future__ import annotations


class ImageBardError(RuntimeError):
    """Base class for every failure raised inside the pipeline."""

    kind = "error"


class ImageValidationError(ImageBardError):
    """Raised when a local file or URL is rejected before any I/O happens."""

    kind = "validation"


class ImageFetchError(ImageBardError):
    """Raised when a remote image cannot be fetched or is not acceptable."""

    kind = "fetch"


class GenerationError(ImageBardError):
    """Raised when a poem request or the model response violates its schema."""

    kind = "generation"

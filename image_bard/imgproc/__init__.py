"""Image acquisition and normalisation."""

from .models import CanonicalImage, ConversionResult, ImageSource, LocalFile, RemoteUrl
from .normalize import ImageNormalizer, normalize_local_file, normalize_remote_url

__all__ = [
    "CanonicalImage",
    "ConversionResult",
    "ImageNormalizer",
    "ImageSource",
    "LocalFile",
    "RemoteUrl",
    "normalize_local_file",
    "normalize_remote_url",
]

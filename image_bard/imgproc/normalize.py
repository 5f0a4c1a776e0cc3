"""Image normalisation helpers.

Both entry points turn a user-supplied image into a :class:`CanonicalImage`
and report problems through :class:`ConversionResult` instead of raising.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from image_bard.config.settings import Settings, get_settings
from image_bard.errors import ImageBardError, ImageFetchError, ImageValidationError
from image_bard.imgproc.models import (
    MIME_TYPE_PATTERN,
    CanonicalImage,
    ConversionResult,
    ImageSource,
    LocalFile,
    RemoteUrl,
)
from image_bard.metrics.prometheus_exporter import image_normalizations_total

logger = logging.getLogger(__name__)

MAX_LOCAL_IMAGE_BYTES = 5 * 1024 * 1024
MAX_REMOTE_IMAGE_BYTES = 10 * 1024 * 1024
ACCEPTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp", "image/gif"})

MISSING_FILE_MESSAGE = "Image is required."
LOCAL_SIZE_MESSAGE = "Max file size is 5MB."
LOCAL_TYPE_MESSAGE = ".jpg, .jpeg, .png, .webp and .gif files are accepted."
INVALID_URL_MESSAGE = "Invalid URL format."
EMPTY_IMAGE_MESSAGE = "Fetched image is empty."
REMOTE_SIZE_MESSAGE = "Image size exceeds 10MB limit."
NETWORK_ERROR_MESSAGE = "Network error or invalid URL. Could not fetch the image."
TIMEOUT_MESSAGE = "Timed out while fetching the image."
GENERIC_URL_MESSAGE = "Failed to convert image URL."

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


def _encode_local(file_bytes: bytes | None, declared_mime_type: str | None, byte_size: int | None) -> CanonicalImage:
    if file_bytes is None:
        raise ImageValidationError(MISSING_FILE_MESSAGE)
    if byte_size is None:
        byte_size = len(file_bytes)
    if byte_size > MAX_LOCAL_IMAGE_BYTES:
        raise ImageValidationError(LOCAL_SIZE_MESSAGE)
    if declared_mime_type not in ACCEPTED_IMAGE_TYPES:
        raise ImageValidationError(LOCAL_TYPE_MESSAGE)
    return CanonicalImage.from_bytes(declared_mime_type, file_bytes)


def normalize_local_file(
    file_bytes: bytes | None,
    declared_mime_type: str | None,
    byte_size: int | None = None,
) -> ConversionResult:
    """Validate a locally selected file and encode it as a canonical image.

    Checks run in a fixed order (presence, size, declared type) and each one
    has its own message. No network access happens here.
    """

    try:
        image = _encode_local(file_bytes, declared_mime_type, byte_size)
    except ImageValidationError as exc:
        logger.info("Rejected local image (%s, %s bytes): %s", declared_mime_type, byte_size, exc)
        image_normalizations_total.labels(source="local", outcome="rejected").inc()
        return ConversionResult.fail(str(exc), "validation")

    image_normalizations_total.labels(source="local", outcome="success").inc()
    return ConversionResult.ok(image)


def _media_type(content_type: str) -> str:
    return content_type.split(";", 1)[0].strip().lower()


def _describe_http_failure(response: httpx.Response) -> str:
    """Prefer a JSON ``message`` from the server, then the reason phrase, then the status code."""

    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    if response.reason_phrase:
        return f"Failed to fetch image: {response.reason_phrase}"
    return f"Failed to fetch image. Status: {response.status_code}"


class ImageNormalizer:
    """Turns local files and remote URLs into canonical images."""

    def __init__(self, settings: Settings | None = None, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def normalize_local(self, source: LocalFile | None) -> ConversionResult:
        if source is None:
            return normalize_local_file(None, None, None)
        return normalize_local_file(source.data, source.declared_mime_type, source.byte_size)

    async def normalize_remote(self, source: RemoteUrl) -> ConversionResult:
        """Fetch ``source.url`` once and encode the response body."""

        try:
            image = await self._fetch(source.url)
        except ImageBardError as exc:
            logger.warning("Could not normalise %s: %s", source.url, exc)
            image_normalizations_total.labels(source="remote", outcome="rejected").inc()
            return ConversionResult.fail(str(exc), exc.kind)
        except httpx.TimeoutException:
            logger.warning("Timed out fetching %s", source.url)
            message = TIMEOUT_MESSAGE
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Transport error fetching %s: %r", source.url, exc)
            message = NETWORK_ERROR_MESSAGE
        except Exception as exc:
            logger.exception("Error converting image URL to data URL: %s", source.url)
            message = str(exc) or GENERIC_URL_MESSAGE
        else:
            image_normalizations_total.labels(source="remote", outcome="success").inc()
            return ConversionResult.ok(image)

        image_normalizations_total.labels(source="remote", outcome="error").inc()
        return ConversionResult.fail(message, "fetch")

    async def normalize(self, source: ImageSource) -> ConversionResult:
        if isinstance(source, RemoteUrl):
            return await self.normalize_remote(source)
        return self.normalize_local(source)

    async def _fetch(self, url: str) -> CanonicalImage:
        try:
            _URL_ADAPTER.validate_python(url)
        except ValidationError as exc:
            raise ImageValidationError(INVALID_URL_MESSAGE) from exc

        client = self._client or httpx.AsyncClient()
        try:
            async with client.stream(
                "GET",
                url,
                headers={"User-Agent": self._settings.image_fetch_user_agent},
                timeout=self._settings.image_fetch_timeout,
                follow_redirects=True,
            ) as response:
                if not response.is_success:
                    await response.aread()
                    raise ImageFetchError(_describe_http_failure(response))

                content_type = response.headers.get("content-type")
                if not content_type or not MIME_TYPE_PATTERN.match(_media_type(content_type)):
                    raise ImageFetchError(
                        f"Invalid content type. URL does not point to an image. Found: {content_type}"
                    )

                body = await response.aread()
        finally:
            if self._client is None:
                await client.aclose()

        if not body:
            raise ImageFetchError(EMPTY_IMAGE_MESSAGE)
        if len(body) > MAX_REMOTE_IMAGE_BYTES:
            raise ImageFetchError(REMOTE_SIZE_MESSAGE)
        return CanonicalImage.from_bytes(_media_type(content_type), body)


async def normalize_remote_url(
    url: str,
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> ConversionResult:
    """Fetch an image by URL and return it as a canonical image (never raises)."""

    return await ImageNormalizer(settings=settings, client=client).normalize_remote(RemoteUrl(url=url))

"""Caller-side working memory for one user of the poem flow."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass

from image_bard.errors import GenerationError
from image_bard.imgproc.models import CanonicalImage, ConversionResult, LocalFile, RemoteUrl
from image_bard.imgproc.normalize import ImageNormalizer
from image_bard.poem.generator import PoemGenerator

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "Please upload an image first."
URL_LOAD_FALLBACK_MESSAGE = "Failed to load image from URL."


class GenerationCounter:
    """Hands out increasing request numbers; only the newest one is current."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest = 0

    def begin(self) -> int:
        self._latest = next(self._counter)
        return self._latest

    def is_current(self, token: int) -> bool:
        return token == self._latest

    @property
    def latest(self) -> int:
        return self._latest


@dataclass(slots=True)
class SessionState:
    """What the presentation layer renders."""

    image: CanonicalImage | None = None
    poem: str | None = None
    error: str | None = None
    is_loading: bool = False


class ImageBardSession:
    """Applies normaliser and generator results, newest request wins.

    Overlapping calls are not serialised. Each call takes a generation number
    when it starts and its outcome is dropped if another call started later.
    """

    def __init__(self, normalizer: ImageNormalizer, generator: PoemGenerator) -> None:
        self._normalizer = normalizer
        self._generator = generator
        self._generations = GenerationCounter()
        self.state = SessionState()

    def _begin(self, *, clear_image: bool) -> int:
        token = self._generations.begin()
        self.state.poem = None
        self.state.error = None
        self.state.is_loading = True
        if clear_image:
            self.state.image = None
        return token

    def _is_stale(self, token: int, action: str) -> bool:
        if self._generations.is_current(token):
            return False
        logger.debug("Discarding stale %s result #%s (latest #%s).", action, token, self._generations.latest)
        return True

    def _apply_conversion(self, token: int, result: ConversionResult, action: str) -> ConversionResult:
        if self._is_stale(token, action):
            return result
        self.state.is_loading = False
        if result.success:
            self.state.image = result.canonical_image
        else:
            self.state.image = None
            self.state.error = result.error_message or URL_LOAD_FALLBACK_MESSAGE
        return result

    def load_local_file(self, source: LocalFile | None) -> ConversionResult:
        token = self._begin(clear_image=True)
        result = self._normalizer.normalize_local(source)
        return self._apply_conversion(token, result, "local file")

    async def load_remote_url(self, url: str) -> ConversionResult:
        token = self._begin(clear_image=True)
        result = await self._normalizer.normalize_remote(RemoteUrl(url=url))
        return self._apply_conversion(token, result, "remote url")

    async def generate_poem(self) -> str | None:
        """Generate a poem for the current image and store it if still relevant."""

        image = self.state.image
        if image is None:
            self.state.poem = None
            self.state.error = NO_IMAGE_MESSAGE
            return None

        token = self._begin(clear_image=False)
        try:
            response = await self._generator.generate_poem({"photoDataUri": image.data_uri})
        except GenerationError as exc:
            if not self._is_stale(token, "poem"):
                self.state.error = str(exc)
            return None
        finally:
            if self._generations.is_current(token):
                self.state.is_loading = False

        if self._is_stale(token, "poem"):
            return None
        self.state.poem = response.poem
        return response.poem

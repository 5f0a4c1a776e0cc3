"""FastAPI entrypoint and HTTP routes."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncIterator

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from prometheus_client import make_asgi_app
from pydantic import BaseModel, ConfigDict, Field

from image_bard.config.settings import get_settings
from image_bard.errors import GenerationError
from image_bard.imgproc.models import RemoteUrl
from image_bard.imgproc.normalize import ImageNormalizer, normalize_local_file
from image_bard.monitoring.logging import configure_logging
from image_bard.poem.generator import PoemGenerator, PoemRequest, PoemResponse

logger = logging.getLogger(__name__)


class ImageUrlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")


class ConversionPayload(BaseModel):
    success: bool
    dataUrl: str | None = None
    error: str | None = None


def get_normalizer() -> ImageNormalizer:
    return ImageNormalizer()


@lru_cache(maxsize=1)
def get_generator() -> PoemGenerator:
    return PoemGenerator()


def create_app() -> FastAPI:
    """Initialise the FastAPI application."""

    settings = get_settings()
    configure_logging()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        await get_generator().close()

    app = FastAPI(
        title="Image Bard API",
        version="0.1.0",
        docs_url="/docs" if settings.environment != "prod" else None,
        redoc_url="/redoc" if settings.environment != "prod" else None,
        lifespan=lifespan,
    )
    app.mount("/metrics", make_asgi_app())

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Simple health endpoint used for readiness checks."""

        return {"status": "ok"}

    @app.post("/api/v1/images/upload", response_model=ConversionPayload, tags=["images"])
    async def upload_image(image: UploadFile = File(...)) -> dict[str, object]:
        """Validate an uploaded file and return it as a data URL."""

        raw = await image.read()
        size = image.size if image.size is not None else len(raw)
        return normalize_local_file(raw, image.content_type, size).as_payload()

    @app.post("/api/v1/images/url", response_model=ConversionPayload, tags=["images"])
    async def load_image_url(
        body: ImageUrlRequest,
        normalizer: ImageNormalizer = Depends(get_normalizer),
    ) -> dict[str, object]:
        """Fetch an image by URL and return it as a data URL."""

        result = await normalizer.normalize_remote(RemoteUrl(url=body.image_url))
        return result.as_payload()

    @app.post("/api/v1/poems", response_model=PoemResponse, tags=["poems"])
    async def create_poem(
        request: PoemRequest,
        generator: PoemGenerator = Depends(get_generator),
    ) -> PoemResponse:
        """Generate a poem for a canonical data URI."""

        try:
            return await generator.generate_poem(request)
        except GenerationError as exc:
            logger.warning("Poem generation failed: %s", exc)
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    return app


app = create_app()

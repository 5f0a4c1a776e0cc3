"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


def _load_env_file(path: str = ".env") -> None:
    """Populate os.environ from the provided .env file if it exists."""

    env_path = Path(path)
    if not env_path.exists():
        return

    for line in env_path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ.setdefault(key.strip(), value.strip())


@dataclass(frozen=True, slots=True)
class Settings:
    """Centralised project settings based on OS environment variables."""

    environment: str = "dev"
    log_level: str = "INFO"

    llm_api_key: str = ""
    llm_base_url: str = "https://api.openai.com/v1"
    poem_model: str = "gpt-4o-mini"
    poem_max_tokens: int = 800
    poem_model_timeout: float = 60.0

    image_fetch_timeout: float = 10.0
    image_fetch_user_agent: str = DEFAULT_USER_AGENT


def _build_settings() -> Settings:
    _load_env_file()

    return Settings(
        environment=os.getenv("ENVIRONMENT", "dev"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        llm_api_key=os.getenv("LLM_API_KEY", ""),
        llm_base_url=os.getenv("LLM_BASE_URL", "https://api.openai.com/v1"),
        poem_model=os.getenv("POEM_MODEL", "gpt-4o-mini"),
        poem_max_tokens=int(os.getenv("POEM_MAX_TOKENS", "800")),
        poem_model_timeout=float(os.getenv("POEM_MODEL_TIMEOUT", "60")),
        image_fetch_timeout=float(os.getenv("IMAGE_FETCH_TIMEOUT", "10")),
        image_fetch_user_agent=os.getenv("IMAGE_FETCH_USER_AGENT", DEFAULT_USER_AGENT),
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance to avoid re-reading configuration."""

    return _build_settings()

"""Tests for the logging setup."""

from __future__ import annotations

import logging

import pytest

from image_bard.monitoring.logging import NOISY_LOGGERS, configure_logging


@pytest.fixture(autouse=True)
def _restore_levels() -> None:
    names = ["", *NOISY_LOGGERS]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_level_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from image_bard.config.settings import get_settings

    monkeypatch.setenv("LOG_LEVEL", "debug")
    get_settings.cache_clear()

    assert configure_logging() == logging.DEBUG
    assert logging.getLogger().level == logging.DEBUG


def test_transport_loggers_are_quietened() -> None:
    configure_logging("INFO")

    for name in NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_unknown_level_falls_back_to_info() -> None:
    assert configure_logging("chatty") == logging.INFO

"""Integration check helpers."""

from .checks import (
    IntegrationCheckResult,
    check_poem_model,
    run_all_checks,
)

__all__ = [
    "IntegrationCheckResult",
    "check_poem_model",
    "run_all_checks",
]

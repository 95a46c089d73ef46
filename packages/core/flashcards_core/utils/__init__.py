"""Utility functions."""

from flashcards_core.utils.logging import (
    configure_logging,
    get_logger,
    log_exceptions,
)
from flashcards_core.utils.retry import with_retry

__all__ = [
    "configure_logging",
    "get_logger",
    "log_exceptions",
    "with_retry",
]

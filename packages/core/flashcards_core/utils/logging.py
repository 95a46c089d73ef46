"""Logging utilities.

Every logger under ``flashcards_core`` propagates to one package logger that
owns the stdout handler. Its level comes from ``Settings.log_level``, so
``FLASHCARDS_LOG_LEVEL`` works from the environment or from ``.env``.
"""

import asyncio
import logging
import sys
from functools import wraps
from typing import Any, Callable, TypeVar

from flashcards_core.settings import settings

PACKAGE_LOGGER = "flashcards_core"
_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def _add_handler(logger: logging.Logger) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)


def configure_logging(level: int | str | None = None) -> logging.Logger:
    """Set up the package logger.

    Args:
        level: Level name or number; defaults to ``settings.log_level``

    Returns:
        The package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        _add_handler(package_logger)
    package_logger.setLevel(
        _resolve_level(settings.log_level if level is None else level)
    )
    return package_logger


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Get a configured logger.

    Package loggers inherit the package level unless ``level`` overrides it.
    Loggers outside the package get their own handler.

    Args:
        name: Logger name (typically __name__)
        level: Optional log level override

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if name == PACKAGE_LOGGER or name.startswith(f"{PACKAGE_LOGGER}."):
        if not logging.getLogger(PACKAGE_LOGGER).handlers:
            configure_logging()
    elif not logger.handlers:
        _add_handler(logger)
        if level is None and logger.level == logging.NOTSET:
            logger.setLevel(_resolve_level(settings.log_level))

    if level is not None:
        logger.setLevel(_resolve_level(level))

    return logger


def log_exceptions(logger: logging.Logger) -> Callable[[F], F]:
    """Decorator to log exceptions from a function.

    Args:
        logger: Logger to use for exception logging

    Returns:
        Decorated function that logs exceptions before re-raising
    """

    def decorator(func: F) -> F:
        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    logger.exception(f"Exception in {func.__name__}: {e}")
                    raise

            return async_wrapper  # type: ignore

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.exception(f"Exception in {func.__name__}: {e}")
                raise

        return sync_wrapper  # type: ignore

    return decorator

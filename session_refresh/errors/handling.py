from __future__ import annotations

import logging
from typing import Any

from ..logging_config import log_structured_error
from .internal import (
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitError,
    StorageError,
)


def classify_error(error: BaseException) -> str:
    """Map an exception onto the error_type label used in structured logs."""
    if isinstance(error, StorageError):
        return "storage"
    if isinstance(error, NetworkError | OSError | ConnectionError | TimeoutError):
        return "network"
    if isinstance(error, OAuthError):
        return "auth"
    if isinstance(error, RateLimitError):
        return "ratelimit"
    if isinstance(error, ParsingError):
        return "parsing"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: Exception,
    context: dict[str, Any] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Logs an error message with the associated exception details.

    Formats and logs an error message along with the string representation
    of the exception using structured logging for error aggregation.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level, ERROR unless the caller downgrades it.

    Returns:
        None

    Raises:
        No exceptions are raised by this function.
    """
    merged: dict[str, Any] = dict(context or {})
    if isinstance(error, InternalError) and error.data:
        for key, value in error.data.items():
            merged.setdefault(key, value)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
        level=level,
    )

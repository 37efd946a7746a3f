"""Error types and logging helpers for session refresh."""

from .handling import classify_error, log_error
from .internal import (
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitContext,
    RateLimitError,
    StorageError,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "OAuthError",
    "ParsingError",
    "RateLimitContext",
    "RateLimitError",
    "StorageError",
    "classify_error",
    "log_error",
]

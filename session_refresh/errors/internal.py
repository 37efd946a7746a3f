"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the persistence and
provider boundaries. Raw aiohttp / OS / JSON errors are wrapped into one of
these before they leave a bundled store or the provider client.

Classes:
  InternalError        – Base for all internal errors.
  StorageError         – Key-value persistence read/write/remove failures.
  NetworkError         – Transport issues talking to the identity provider.
  OAuthError           – Provider rejected the refresh token or client.
  ParsingError         – Provider response could not be interpreted.
  RateLimitError       – Explicit rate limiting signalled by the provider.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


class InternalError(Exception):
    """Base class for all internal errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class StorageError(InternalError):
    """Exception raised when the key-value persistence layer fails.

    The session store adapter never lets this escape; it only exists so
    bundled backends can report failures with a uniform type.
    """


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    Includes connection failures, timeouts and unexpected HTTP statuses
    from the token endpoint.
    """


class OAuthError(InternalError):
    """Exception raised when the provider rejects the token exchange.

    Typically the refresh token was already used, revoked or the client
    credentials are wrong. Presenting the same token again will not help.
    """


class ParsingError(InternalError):
    """Exception raised for malformed provider responses."""


@dataclass
class RateLimitContext:
    """Context information for rate limiting errors.

    Attributes:
        retry_after: Seconds the provider asked to wait, or None if unknown.
    """

    retry_after: float | None = None


class RateLimitError(InternalError):
    """Exception raised when the provider answers with HTTP 429.

    Args:
        message: Optional error message, defaults to "Rate limited".
        context: Optional RateLimitContext with additional rate limit details.
    """

    def __init__(
        self, message: str = "Rate limited", *, context: RateLimitContext | None = None
    ):
        super().__init__(message, data={"rate_limit": context})


__all__ = [
    "InternalError",
    "StorageError",
    "NetworkError",
    "OAuthError",
    "ParsingError",
    "RateLimitError",
    "RateLimitContext",
]

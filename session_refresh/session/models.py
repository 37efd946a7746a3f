"""Session value types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from ..errors.internal import ParsingError
from ..utils import utc_now


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_expiry(raw: str | None) -> datetime | None:
    """Parse a persisted expiry string; None when missing or unparseable."""
    if not raw:
        return None
    try:
        return _as_utc(datetime.fromisoformat(raw.strip()))
    except (TypeError, ValueError):
        return None


def format_expiry_value(expires_at: datetime) -> str:
    """Serialize an expiry in the round-trippable ISO-8601 form used on disk."""
    return _as_utc(expires_at).isoformat()


@dataclass(frozen=True)
class Session:
    """A renewed credential as produced by the refresh operation.

    Attributes:
        access_token: Opaque bearer token, non-empty when valid.
        refresh_token: Rotating refresh token; empty if the provider omits rotation.
        expires_at: Absolute expiry (timezone-aware UTC).
    """

    access_token: str
    refresh_token: str
    expires_at: datetime

    def __post_init__(self) -> None:
        # Provider adapters sometimes hand back None for a missing rotation
        if self.refresh_token is None:
            object.__setattr__(self, "refresh_token", "")
        object.__setattr__(self, "expires_at", _as_utc(self.expires_at))

    def remaining_seconds(self, now: datetime | None = None) -> float:
        return (self.expires_at - (now or utc_now())).total_seconds()

    @classmethod
    def from_token_response(
        cls,
        payload: Mapping[str, Any],
        *,
        previous_refresh_token: str = "",
        now: datetime | None = None,
    ) -> Session:
        """Build a Session from an OAuth token endpoint JSON body.

        Absolute ``expires_at`` (epoch seconds) wins over relative
        ``expires_in``. A response without ``refresh_token`` keeps the
        token that was presented.

        Raises:
            ParsingError: If the access token or every expiry field is missing/invalid.
        """
        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ParsingError("Missing access_token in refresh response")
        refresh_token = payload.get("refresh_token") or previous_refresh_token
        if not isinstance(refresh_token, str):
            raise ParsingError("refresh_token in refresh response is not a string")

        expires_at_raw = payload.get("expires_at")
        expires_in_raw = payload.get("expires_in")
        try:
            if expires_at_raw is not None:
                expires_at = datetime.fromtimestamp(float(expires_at_raw), UTC)
            elif expires_in_raw is not None:
                expires_at = (now or utc_now()) + timedelta(
                    seconds=float(expires_in_raw)
                )
            else:
                raise ParsingError("Missing expires_in/expires_at in refresh response")
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise ParsingError(f"Invalid expiry in refresh response: {e}") from e
        return cls(access_token, refresh_token, expires_at)


@dataclass(frozen=True)
class StoredSession:
    """The persisted projection of a Session as read back from storage.

    Only produced with non-empty access and refresh tokens; ``expires_at``
    is None when the stored expiry was missing or unparseable.
    """

    access_token: str
    refresh_token: str
    expires_at: datetime | None = None

    def to_session(self) -> Session | None:
        """Session view of this record, or None while the expiry is unknown."""
        if self.expires_at is None:
            return None
        return Session(self.access_token, self.refresh_token, self.expires_at)

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return True
        return self.expires_at <= (now or utc_now())

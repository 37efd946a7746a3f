"""General utility helper functions."""

from __future__ import annotations

from datetime import UTC, datetime

__all__ = ["format_duration", "format_expiry", "utc_now"]


def utc_now() -> datetime:
    return datetime.now(UTC)


def format_duration(total_seconds: int | float | None) -> str:
    """Return a human-friendly Hh Mm Ss string for a duration in seconds.

    Examples:
      65 -> "1m 5s"
      3605 -> "1h 0m 5s" (hours, minutes, seconds)
      59 -> "59s"
      -30 -> "expired 30s ago"
    """
    if total_seconds is None:
        return "unknown"
    seconds = int(total_seconds)
    if seconds < 0:
        return f"expired {format_duration(-seconds)} ago"
    if seconds < 60:
        return f"{seconds}s"
    minutes, sec = divmod(seconds, 60)
    if minutes < 60:
        return f"{minutes}m {sec}s"
    hours, minutes = divmod(minutes, 60)
    if hours < 24:
        return f"{hours}h {minutes}m {sec}s"
    days, hours = divmod(hours, 24)
    return f"{days}d {hours}h {minutes}m {sec}s"


def format_expiry(expires_at: datetime | None) -> str:
    """Render an expiry as ``YYYY-MM-DD HH:MM:SS`` (UTC) or ``unknown``."""
    if expires_at is None:
        return "unknown"
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return expires_at.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S")

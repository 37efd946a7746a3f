"""Utility functions package for the session refresh coordinator.

Exposed functions:
    format_duration: Formats time durations into human-readable strings.
    format_expiry: Formats an absolute expiry for log messages.
    utc_now: Current timezone-aware UTC time.
"""

from .helpers import format_duration, format_expiry, utc_now

__all__ = ["format_duration", "format_expiry", "utc_now"]

"""Protocol definitions for key-value persistence.

Any object with these three coroutine methods can back a SessionStore:
browser local storage bridges, Redis wrappers, keyring adapters, etc.
Every call is allowed to raise; the session store adapter catches.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for an async string key-value store."""

    async def get(self, key: str) -> str | None:
        """Return the value stored under key, or None when missing."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...

    async def remove(self, key: str) -> None:
        """Delete key; removing a missing key is not an error."""
        ...

"""Session token refresh coordination.

Keeps a cached authentication session in a key-value store and serializes
renewal so that a rotating refresh token is presented at most once per
cooldown window.
"""

from .session.coordinator import RefreshCoordinator, RefreshOutcome, RefreshResult
from .session.models import Session, StoredSession
from .session.store import SessionStore

__all__ = [
    "RefreshCoordinator",
    "RefreshOutcome",
    "RefreshResult",
    "Session",
    "SessionStore",
    "StoredSession",
]

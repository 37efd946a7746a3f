"""Session data model, persistence adapter and refresh coordinator."""

from .coordinator import RefreshCoordinator, RefreshOperation, RefreshOutcome, RefreshResult
from .models import Session, StoredSession, format_expiry_value, parse_expiry
from .store import SessionStore

__all__ = [
    "RefreshCoordinator",
    "RefreshOperation",
    "RefreshOutcome",
    "RefreshResult",
    "Session",
    "SessionStore",
    "StoredSession",
    "format_expiry_value",
    "parse_expiry",
]

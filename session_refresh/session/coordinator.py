"""Serialized, rate-limited session refresh."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from ..constants import (
    SESSION_REFRESH_COOLDOWN_SECONDS,
    SESSION_REFRESH_THRESHOLD_SECONDS,
)
from ..errors.handling import log_error
from ..utils import format_duration, format_expiry, utc_now
from .models import Session, StoredSession
from .store import SessionStore

RefreshOperation = Callable[[], Awaitable[Session | None]]


class RefreshOutcome(str, Enum):
    """Enumeration of possible outcomes of a guarded refresh attempt.

    Attributes:
        REFRESHED: The operation ran and produced a new session.
        COOLDOWN: Rejected because an attempt started less than a cooldown ago.
        EMPTY: The operation ran and returned no session.
        FAILED: The operation ran and raised.
        LOCK_TIMEOUT: The lock could not be acquired within ``lock_timeout``.
    """

    REFRESHED = "refreshed"
    COOLDOWN = "cooldown"
    EMPTY = "empty"
    FAILED = "failed"
    LOCK_TIMEOUT = "lock_timeout"


@dataclass
class RefreshResult:
    """Result of a guarded refresh attempt.

    Attributes:
        outcome: What happened.
        session: The new session when outcome is REFRESHED, else None.
        persisted: Whether the new session reached storage.
        error: Exception raised by the refresh operation, if any.
    """

    outcome: RefreshOutcome
    session: Session | None = None
    persisted: bool = False
    error: Exception | None = None


class RefreshCoordinator:
    """Runs at most one refresh operation at a time, at most once per cooldown.

    One instance per session scope. Callers first ask ``should_refresh`` and
    then funnel through ``execute_refresh_with_lock``; the identity provider
    rejects a rotated refresh token presented twice within its
    reuse-prevention interval, which the cooldown mirrors.

    Args:
        store: Adapter used to persist refreshed sessions.
        cooldown_seconds: Minimum spacing between attempt starts.
        threshold_seconds: Expiry proximity below which a refresh is due.
        clock: Monotonic seconds source for the cooldown.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        cooldown_seconds: float = SESSION_REFRESH_COOLDOWN_SECONDS,
        threshold_seconds: float = SESSION_REFRESH_THRESHOLD_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if store is None:
            raise TypeError("store cannot be None")
        self.store = store
        self.cooldown_seconds = cooldown_seconds
        self.threshold_seconds = threshold_seconds
        self._clock = clock
        self._lock = asyncio.Lock()
        # Beginning of time: the first attempt is never in cooldown.
        self._last_refresh_attempt = float("-inf")

    @property
    def last_refresh_attempt(self) -> float:
        return self._last_refresh_attempt

    @property
    def refreshing(self) -> bool:
        return self._lock.locked()

    def should_refresh(
        self, expires_at: datetime | None, now: datetime | None = None
    ) -> bool:
        """Return True when a session expiring at expires_at is due for renewal.

        Unknown expiry is due. Otherwise due when strictly less than the
        threshold remains (including already expired). Pure; safe to call
        from any task without coordination.
        """
        if expires_at is None:
            return True
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        remaining = (expires_at - (now or utc_now())).total_seconds()
        return remaining < self.threshold_seconds

    def cooldown_remaining(self) -> float:
        """Seconds until the next attempt may start (0 when not cooling down)."""
        elapsed = self._clock() - self._last_refresh_attempt
        return max(self.cooldown_seconds - elapsed, 0.0)

    def _in_cooldown(self) -> bool:
        return self._clock() - self._last_refresh_attempt < self.cooldown_seconds

    async def execute_refresh_with_lock(
        self,
        refresh_operation: RefreshOperation,
        *,
        lock_timeout: float | None = None,
    ) -> Session | None:
        """Run refresh_operation exclusively and persist what it returns.

        Returns the new session, or None when the attempt was rejected by the
        cooldown, produced nothing, or failed. Never raises for provider or
        storage failures.
        """
        result = await self.attempt_refresh(refresh_operation, lock_timeout=lock_timeout)
        return result.session

    async def attempt_refresh(
        self,
        refresh_operation: RefreshOperation,
        *,
        lock_timeout: float | None = None,
    ) -> RefreshResult:
        """Guarded refresh returning a detailed RefreshResult.

        Args:
            refresh_operation: Zero-argument coroutine function doing the
                provider exchange.
            lock_timeout: Optional bound, in seconds, on the wait for the lock.
                None waits indefinitely.

        Returns:
            RefreshResult describing the attempt.
        """
        # Optimistic fast path: reject bursts without touching the lock.
        if self._in_cooldown():
            logging.debug(
                f"⏳ Refresh in cooldown ({format_duration(self.cooldown_remaining())} remaining)"
            )
            return RefreshResult(RefreshOutcome.COOLDOWN)

        if not await self._acquire(lock_timeout):
            logging.warning(
                f"⏱️ Refresh lock not acquired within {lock_timeout}s; skipping refresh"
            )
            return RefreshResult(RefreshOutcome.LOCK_TIMEOUT)
        try:
            # Another task may have refreshed while this one waited.
            if self._in_cooldown():
                logging.debug("⏳ Refresh completed by another caller while waiting")
                return RefreshResult(RefreshOutcome.COOLDOWN)

            logging.info("🔄 Executing session refresh (locked)")
            # Start the cooldown before the call so a slow or failing attempt
            # still holds back retries.
            self._last_refresh_attempt = self._clock()
            return await self._run_operation(refresh_operation)
        finally:
            self._lock.release()

    async def _acquire(self, lock_timeout: float | None) -> bool:
        if lock_timeout is None:
            await self._lock.acquire()
            return True
        try:
            async with asyncio.timeout(lock_timeout):
                await self._lock.acquire()
        except TimeoutError:
            return False
        return True

    async def _run_operation(self, refresh_operation: RefreshOperation) -> RefreshResult:
        try:
            session = await refresh_operation()
        except Exception as e:  # noqa: BLE001
            log_error("Session refresh failed", e, context={"stage": "refresh_operation"})
            return RefreshResult(RefreshOutcome.FAILED, error=e)

        if session is None:
            logging.warning("⚠️ Session refresh returned no session")
            return RefreshResult(RefreshOutcome.EMPTY)

        persisted = await self.store.store_session(session)
        if not persisted:
            logging.warning(
                "⚠️ Refreshed session kept in memory only (persist failed)"
            )
        logging.info(
            f"✅ Session refreshed (expires: {format_expiry(session.expires_at)}, "
            f"lifetime {format_duration(session.remaining_seconds())})"
        )
        return RefreshResult(RefreshOutcome.REFRESHED, session, persisted)

    async def ensure_fresh(
        self,
        refresh_operation: RefreshOperation,
        *,
        lock_timeout: float | None = None,
    ) -> Session | None:
        """Return a usable session, refreshing through the guard when due.

        When the refresh yields nothing but the stored session has not
        actually expired yet, the stored session is returned so callers keep
        working until real expiry.
        """
        stored = await self.store.get_stored_session()
        if stored is not None and not self.should_refresh(stored.expires_at):
            return stored.to_session()

        refreshed = await self.execute_refresh_with_lock(
            refresh_operation, lock_timeout=lock_timeout
        )
        if refreshed is not None:
            return refreshed
        return self._fallback(stored)

    @staticmethod
    def _fallback(stored: StoredSession | None) -> Session | None:
        if stored is None or stored.is_expired():
            return None
        logging.debug(
            f"⏳ Using stored session until expiry (expires: {format_expiry(stored.expires_at)})"
        )
        return stored.to_session()

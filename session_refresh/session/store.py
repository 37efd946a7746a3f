"""Session store adapter over a generic async key-value store.

Storage failures never propagate out of this module: reads degrade to
"no session" and writes degrade to "in-memory only". Write/clear
operations report that through their bool return value.
"""

from __future__ import annotations

import logging

from ..constants import (
    ACCESS_TOKEN_KEY,
    OAUTH_RETURN_URL_KEY,
    PKCE_VERIFIER_KEY,
    REFRESH_TOKEN_KEY,
    SESSION_EXPIRY_KEY,
    SESSION_STORAGE_KEY_PREFIX,
)
from ..errors.handling import log_error
from ..storage.protocols import KeyValueStore
from ..utils import format_expiry
from .models import Session, StoredSession, format_expiry_value, parse_expiry


class SessionStore:
    """Reads and writes the (access, refresh, expiry) triple.

    Args:
        storage: Backend implementing ``KeyValueStore``.
        key_prefix: Prepended to every key, letting several apps share a backend.
    """

    def __init__(
        self, storage: KeyValueStore, key_prefix: str = SESSION_STORAGE_KEY_PREFIX
    ) -> None:
        if storage is None:
            raise TypeError("storage cannot be None")
        self.storage = storage
        self.key_prefix = key_prefix

    def key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    @property
    def session_keys(self) -> tuple[str, str, str]:
        return (
            self.key(ACCESS_TOKEN_KEY),
            self.key(REFRESH_TOKEN_KEY),
            self.key(SESSION_EXPIRY_KEY),
        )

    async def get_stored_session(self) -> StoredSession | None:
        """Return the persisted session, or None when it is unusable.

        A session with an access token but no refresh token cannot renew
        itself and is reported as absent. Any storage error also reads as
        absent.
        """
        access_key, refresh_key, expiry_key = self.session_keys
        try:
            access_token = await self.storage.get(access_key)
            refresh_token = await self.storage.get(refresh_key)
            expiry_raw = await self.storage.get(expiry_key)
        except Exception as e:  # noqa: BLE001
            log_error("Error getting stored session", e)
            return None

        if not access_token or not refresh_token:
            logging.debug("🔍 No stored session (missing access or refresh token)")
            return None

        expires_at = parse_expiry(expiry_raw)
        if expires_at is None and expiry_raw:
            logging.debug(f"❔ Stored session expiry unparseable value={expiry_raw!r}")
        return StoredSession(access_token, refresh_token, expires_at)

    async def store_session(self, session: Session) -> bool:
        """Persist all three fields of session.

        Returns:
            True when every write succeeded, False if the session only lives
            in memory now.
        """
        access_key, refresh_key, expiry_key = self.session_keys
        try:
            await self.storage.set(access_key, session.access_token)
            await self.storage.set(refresh_key, session.refresh_token or "")
            await self.storage.set(expiry_key, format_expiry_value(session.expires_at))
        except Exception as e:  # noqa: BLE001
            log_error("Error storing session", e)
            return False
        logging.debug(f"✅ Session stored (expires: {format_expiry(session.expires_at)})")
        return True

    async def clear_session(self) -> bool:
        """Remove all three session keys. Leaves the OAuth flow slots alone."""
        try:
            for key in self.session_keys:
                await self.storage.remove(key)
        except Exception as e:  # noqa: BLE001
            log_error("Error clearing session", e)
            return False
        logging.debug("✅ Session cleared")
        return True

    # --- OAuth sign-in flow slots ---

    async def store_pkce_verifier(self, verifier: str) -> bool:
        return await self._set_value(PKCE_VERIFIER_KEY, verifier)

    async def get_pkce_verifier(self) -> str | None:
        return await self._get_value(PKCE_VERIFIER_KEY)

    async def clear_pkce_verifier(self) -> bool:
        return await self._remove_value(PKCE_VERIFIER_KEY)

    async def store_oauth_return_url(self, url: str) -> bool:
        return await self._set_value(OAUTH_RETURN_URL_KEY, url)

    async def get_oauth_return_url(self) -> str | None:
        return await self._get_value(OAUTH_RETURN_URL_KEY)

    async def clear_oauth_return_url(self) -> bool:
        return await self._remove_value(OAUTH_RETURN_URL_KEY)

    async def _get_value(self, name: str) -> str | None:
        try:
            value = await self.storage.get(self.key(name))
        except Exception as e:  # noqa: BLE001
            log_error(f"Error reading {name}", e)
            return None
        return value or None

    async def _set_value(self, name: str, value: str) -> bool:
        try:
            await self.storage.set(self.key(name), value)
        except Exception as e:  # noqa: BLE001
            log_error(f"Error storing {name}", e)
            return False
        return True

    async def _remove_value(self, name: str) -> bool:
        try:
            await self.storage.remove(self.key(name))
        except Exception as e:  # noqa: BLE001
            log_error(f"Error removing {name}", e)
            return False
        return True

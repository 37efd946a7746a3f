"""Refresh-token exchange HTTP client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aiohttp

from ..config import ProviderSettings
from ..errors.internal import (
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitContext,
    RateLimitError,
)
from ..session.models import Session
from ..utils import format_duration

if TYPE_CHECKING:
    from ..session.coordinator import RefreshOperation
    from ..session.store import SessionStore


class RefreshClient:
    """Exchanges a refresh token for a new session at the provider.

    Makes exactly one request per call and never retries; pacing belongs to
    the RefreshCoordinator.
    """

    def __init__(
        self, settings: ProviderSettings, http_session: aiohttp.ClientSession
    ) -> None:
        """Initialize the refresh client.

        Args:
            settings: Provider endpoint and credentials.
            http_session: HTTP session for making requests.
        """
        if http_session is None:
            raise TypeError("http_session cannot be None")
        self.settings = settings
        self.session = http_session

    def _form(self, refresh_token: str) -> dict[str, str]:
        data = {
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": self.settings.client_id,
        }
        if self.settings.client_secret:
            data["client_secret"] = self.settings.client_secret
        return data

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.api_key:
            headers["apikey"] = self.settings.api_key
        return headers

    async def refresh(self, refresh_token: str) -> Session:
        """Refresh an access token using the refresh token.

        Args:
            refresh_token: The refresh token to present (used at most once).

        Returns:
            The new Session.

        Raises:
            OAuthError: The provider rejected the token (400/401).
            RateLimitError: The provider answered 429.
            ParsingError: The success body was malformed.
            NetworkError: Timeouts, transport failures and other statuses.
        """
        if not refresh_token:
            raise OAuthError("No refresh token available")
        timeout = aiohttp.ClientTimeout(total=self.settings.timeout_seconds)
        try:
            async with self.session.post(
                self.settings.token_url,
                data=self._form(refresh_token),
                headers=self._headers(),
                timeout=timeout,
            ) as resp:
                if resp.status == 200:
                    try:
                        payload = await resp.json(content_type=None)
                    except ValueError as e:
                        raise ParsingError(f"Refresh response is not JSON: {e}") from e
                    if not isinstance(payload, dict):
                        raise ParsingError("Refresh response is not a JSON object")
                    session = Session.from_token_response(
                        payload, previous_refresh_token=refresh_token
                    )
                    logging.debug(
                        f"Token exchange succeeded (lifetime {format_duration(session.remaining_seconds())}) "
                        f"rotated={session.refresh_token != refresh_token}"
                    )
                    return session
                if resp.status in (400, 401):
                    raise OAuthError(
                        f"Refresh token rejected (status={resp.status})",
                        data={"status": resp.status},
                    )
                if resp.status == 429:
                    raise RateLimitError(
                        "Rate limited during refresh",
                        context=RateLimitContext(
                            retry_after=_retry_after(resp.headers.get("Retry-After"))
                        ),
                    )
                raise NetworkError(
                    f"HTTP {resp.status} during token refresh",
                    data={"status": resp.status},
                )
        except TimeoutError as e:
            raise NetworkError("Token refresh timeout") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error during token refresh: {e}") from e

    def operation_for(self, store: SessionStore) -> RefreshOperation:
        """Build a zero-argument refresh operation bound to store.

        The operation reads the currently stored refresh token at call time,
        so it always presents the latest rotation.
        """

        async def _refresh_operation() -> Session | None:
            stored = await store.get_stored_session()
            if stored is None:
                logging.info("❔ No stored refresh token; sign-in required")
                return None
            return await self.refresh(stored.refresh_token)

        return _refresh_operation


def _retry_after(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None

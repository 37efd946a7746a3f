"""
Unit tests for RefreshClient.
"""

from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest

from session_refresh.auth.client import RefreshClient
from session_refresh.config import ProviderSettings
from session_refresh.errors.internal import (
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitError,
)
from session_refresh.session.models import Session
from tests.fixtures.session_fixtures import make_session


def _settings(**overrides):
    values = {
        "token_url": "https://auth.example.com/token",
        "client_id": "cid",
    }
    values.update(overrides)
    return ProviderSettings(**values)


def _http_session(status=200, payload=None, json_error=None, headers=None):
    resp = Mock()
    resp.status = status
    resp.headers = headers or {}
    if json_error is not None:
        resp.json = AsyncMock(side_effect=json_error)
    else:
        resp.json = AsyncMock(return_value=payload)
    http_session = MagicMock()
    http_session.post.return_value.__aenter__.return_value = resp
    http_session.post.return_value.__aexit__.return_value = False
    return http_session


class TestRefreshClient:
    """Test class for RefreshClient functionality."""

    @pytest.mark.asyncio
    async def test_refresh_success(self):
        http_session = _http_session(
            payload={"access_token": "new", "refresh_token": "rot", "expires_in": 3600}
        )
        client = RefreshClient(_settings(), http_session)

        session = await client.refresh("old")

        assert isinstance(session, Session)
        assert session.access_token == "new"
        assert session.refresh_token == "rot"
        assert 3590 < session.remaining_seconds() <= 3600

    @pytest.mark.asyncio
    async def test_refresh_posts_refresh_grant(self):
        http_session = _http_session(payload={"access_token": "new", "expires_in": 60})
        client = RefreshClient(_settings(client_secret="sec", api_key="k"), http_session)

        await client.refresh("old")

        args, kwargs = http_session.post.call_args
        assert args[0] == "https://auth.example.com/token"
        assert kwargs["data"] == {
            "grant_type": "refresh_token",
            "refresh_token": "old",
            "client_id": "cid",
            "client_secret": "sec",
        }
        assert kwargs["headers"]["apikey"] == "k"
        assert isinstance(kwargs["timeout"], aiohttp.ClientTimeout)

    @pytest.mark.asyncio
    async def test_public_client_sends_no_secret(self):
        http_session = _http_session(payload={"access_token": "new", "expires_in": 60})
        await RefreshClient(_settings(), http_session).refresh("old")
        assert "client_secret" not in http_session.post.call_args.kwargs["data"]
        assert "apikey" not in http_session.post.call_args.kwargs["headers"]

    @pytest.mark.asyncio
    async def test_missing_rotation_keeps_old_token(self):
        http_session = _http_session(payload={"access_token": "new", "expires_in": 60})
        session = await RefreshClient(_settings(), http_session).refresh("old")
        assert session.refresh_token == "old"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401])
    async def test_rejected_token_raises_oauth_error(self, status):
        client = RefreshClient(_settings(), _http_session(status=status))
        with pytest.raises(OAuthError):
            await client.refresh("used")

    @pytest.mark.asyncio
    async def test_rate_limit(self):
        client = RefreshClient(
            _settings(), _http_session(status=429, headers={"Retry-After": "12"})
        )
        with pytest.raises(RateLimitError) as exc_info:
            await client.refresh("r")
        assert exc_info.value.data["rate_limit"].retry_after == 12.0

    @pytest.mark.asyncio
    async def test_server_error_is_network_error(self):
        client = RefreshClient(_settings(), _http_session(status=503))
        with pytest.raises(NetworkError):
            await client.refresh("r")

    @pytest.mark.asyncio
    async def test_invalid_json_is_parsing_error(self):
        client = RefreshClient(_settings(), _http_session(json_error=ValueError("bad")))
        with pytest.raises(ParsingError):
            await client.refresh("r")

    @pytest.mark.asyncio
    async def test_non_object_json_is_parsing_error(self):
        client = RefreshClient(_settings(), _http_session(payload=["x"]))
        with pytest.raises(ParsingError):
            await client.refresh("r")

    @pytest.mark.asyncio
    async def test_missing_access_token_is_parsing_error(self):
        client = RefreshClient(_settings(), _http_session(payload={"expires_in": 60}))
        with pytest.raises(ParsingError):
            await client.refresh("r")

    @pytest.mark.asyncio
    async def test_client_error_wrapped(self):
        http_session = MagicMock()
        http_session.post.side_effect = aiohttp.ClientConnectionError("refused")
        with pytest.raises(NetworkError):
            await RefreshClient(_settings(), http_session).refresh("r")

    @pytest.mark.asyncio
    async def test_timeout_wrapped(self):
        http_session = MagicMock()
        http_session.post.side_effect = TimeoutError()
        with pytest.raises(NetworkError, match="timeout"):
            await RefreshClient(_settings(), http_session).refresh("r")

    @pytest.mark.asyncio
    async def test_empty_refresh_token_rejected_without_request(self):
        http_session = MagicMock()
        with pytest.raises(OAuthError):
            await RefreshClient(_settings(), http_session).refresh("")
        http_session.post.assert_not_called()

    def test_none_http_session_rejected(self):
        with pytest.raises(TypeError):
            RefreshClient(_settings(), None)  # type: ignore[arg-type]


class TestOperationFor:
    """Refresh operation bound to a session store."""

    @pytest.mark.asyncio
    async def test_uses_current_stored_refresh_token(self, store):
        await store.store_session(make_session("a1", "r1"))
        client = RefreshClient(_settings(), MagicMock())
        client.refresh = AsyncMock(return_value=make_session("a2", "r2"))

        result = await client.operation_for(store)()

        client.refresh.assert_awaited_once_with("r1")
        assert result.access_token == "a2"

    @pytest.mark.asyncio
    async def test_no_stored_session_returns_none(self, store):
        client = RefreshClient(_settings(), MagicMock())
        client.refresh = AsyncMock()

        assert await client.operation_for(store)() is None
        client.refresh.assert_not_awaited()

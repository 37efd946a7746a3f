"""Identity provider settings loaded from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from urllib.parse import urlparse

from .constants import SESSION_REFRESH_HTTP_TIMEOUT_SECONDS


@dataclass
class ProviderSettings:
    """Where and how to exchange a refresh token.

    Attributes:
        token_url: OAuth token endpoint receiving the refresh_token grant.
        client_id: OAuth client identifier.
        client_secret: Client secret for confidential clients, else None.
        api_key: Sent as an ``apikey`` header when set (hosted auth gateways).
        timeout_seconds: Total timeout for one exchange request.
    """

    token_url: str
    client_id: str
    client_secret: str | None = None
    api_key: str | None = None
    timeout_seconds: float = SESSION_REFRESH_HTTP_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> ProviderSettings:
        source = os.environ if env is None else env
        return cls(
            token_url=source.get("SESSION_TOKEN_URL", "").strip(),
            client_id=source.get("SESSION_CLIENT_ID", "").strip(),
            client_secret=source.get("SESSION_CLIENT_SECRET") or None,
            api_key=source.get("SESSION_API_KEY") or None,
        )

    def validate(self) -> list[str]:
        """Return a list of human-readable problems (empty when usable)."""
        problems: list[str] = []
        parsed = urlparse(self.token_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            problems.append("SESSION_TOKEN_URL must be an http(s) URL")
        if not self.client_id:
            problems.append("SESSION_CLIENT_ID is required")
        if self.timeout_seconds <= 0:
            problems.append("timeout must be positive")
        return problems

    def is_valid(self) -> bool:
        return not self.validate()

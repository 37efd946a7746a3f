"""
Unit tests for ProviderSettings.
"""

from session_refresh.config import ProviderSettings


def test_from_env_reads_all_fields():
    settings = ProviderSettings.from_env(
        {
            "SESSION_TOKEN_URL": " https://auth.example.com/token ",
            "SESSION_CLIENT_ID": "cid",
            "SESSION_CLIENT_SECRET": "sec",
            "SESSION_API_KEY": "key",
        }
    )
    assert settings.token_url == "https://auth.example.com/token"
    assert settings.client_id == "cid"
    assert settings.client_secret == "sec"
    assert settings.api_key == "key"
    assert settings.is_valid()


def test_from_env_empty_optional_values_are_none():
    settings = ProviderSettings.from_env(
        {"SESSION_TOKEN_URL": "https://x/token", "SESSION_CLIENT_ID": "cid", "SESSION_CLIENT_SECRET": ""}
    )
    assert settings.client_secret is None
    assert settings.api_key is None


def test_validate_reports_problems():
    problems = ProviderSettings(token_url="ftp://nope", client_id="", timeout_seconds=0).validate()
    assert len(problems) == 3


def test_missing_env_is_invalid():
    assert not ProviderSettings.from_env({}).is_valid()

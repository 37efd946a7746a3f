"""Tests for constants module env parsing."""

import importlib

import session_refresh.constants as constants


def test_defaults():
    assert constants.SESSION_REFRESH_THRESHOLD_SECONDS == 300
    assert constants.SESSION_REFRESH_COOLDOWN_SECONDS == 10
    assert constants.ACCESS_TOKEN_KEY == "access_token"
    assert constants.REFRESH_TOKEN_KEY == "refresh_token"
    assert constants.SESSION_EXPIRY_KEY == "session_expiry"


def test_env_int_parsing(monkeypatch):
    monkeypatch.setenv("X_INT", "42")
    assert constants._get_env_int("X_INT", 1) == 42
    monkeypatch.setenv("X_INT", "abc")
    assert constants._get_env_int("X_INT", 1) == 1
    assert constants._get_env_int("X_MISSING", 7) == 7


def test_env_float_parsing(monkeypatch):
    monkeypatch.setenv("X_FLOAT", "2.5")
    assert constants._get_env_float("X_FLOAT", 1.0) == 2.5
    monkeypatch.setenv("X_FLOAT", "nope")
    assert constants._get_env_float("X_FLOAT", 1.0) == 1.0


def test_env_str(monkeypatch):
    monkeypatch.setenv("X_STR", "")
    assert constants._get_env_str("X_STR", "d") == ""
    assert constants._get_env_str("X_STR_MISSING", "d") == "d"


def test_env_override_on_reload(monkeypatch):
    monkeypatch.setenv("SESSION_REFRESH_COOLDOWN_SECONDS", "2.5")
    try:
        reloaded = importlib.reload(constants)
        assert reloaded.SESSION_REFRESH_COOLDOWN_SECONDS == 2.5
    finally:
        monkeypatch.delenv("SESSION_REFRESH_COOLDOWN_SECONDS")
        importlib.reload(constants)

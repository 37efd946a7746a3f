"""Tests for error classification and structured error logging."""

import logging

import pytest

from session_refresh.errors import (
    InternalError,
    NetworkError,
    OAuthError,
    ParsingError,
    RateLimitContext,
    RateLimitError,
    StorageError,
    classify_error,
    log_error,
)
from session_refresh.logging_config import error_aggregator


@pytest.mark.parametrize(
    "error,expected",
    [
        (StorageError("x"), "storage"),
        (NetworkError("x"), "network"),
        (ConnectionResetError(), "network"),
        (TimeoutError(), "network"),
        (OAuthError("x"), "auth"),
        (RateLimitError(), "ratelimit"),
        (ParsingError("x"), "parsing"),
        (InternalError("x"), "internal"),
        (KeyError("x"), "unknown"),
    ],
)
def test_classify_error(error, expected):
    assert classify_error(error) == expected


def test_internal_error_copies_data():
    data = {"status": 401}
    err = OAuthError("denied", data=data)
    data["status"] = 500
    assert err.data == {"status": 401}


def test_rate_limit_error_carries_context():
    err = RateLimitError(context=RateLimitContext(retry_after=3))
    assert str(err) == "Rate limited"
    assert err.data["rate_limit"].retry_after == 3


def test_log_error_includes_error_data(caplog):
    with caplog.at_level(logging.ERROR):
        log_error("Session refresh failed", OAuthError("denied", data={"status": 401}))
    assert "[AUTH] Session refresh failed: denied" in caplog.text
    assert "status=401" in caplog.text
    assert error_aggregator.get_error_summary()["auth"]["total_count"] == 1


def test_log_error_respects_level(caplog):
    with caplog.at_level(logging.WARNING):
        log_error("minor", StorageError("x"), level=logging.WARNING)
    assert caplog.records[-1].levelno == logging.WARNING

"""
Configuration constants for the session refresh coordinator

This module contains all tunable constants used throughout the package.
Each constant can be overridden by setting an environment variable with the same name.
"""

import os


def _get_env_int(name: str, default: int) -> int:
    """Retrieve an integer value from an environment variable.

    Attempts to parse the environment variable as an integer. If the variable
    is not set or cannot be parsed, prints a warning and returns the default value.

    Args:
        name: The name of the environment variable to read.
        default: The default integer value to return if parsing fails.

    Returns:
        The parsed integer value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            print(
                f"Warning: Invalid integer value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_float(name: str, default: float) -> float:
    """Retrieve a float value from an environment variable.

    Args:
        name: The name of the environment variable to read.
        default: The default float value to return if parsing fails.

    Returns:
        The parsed float value from the environment, or the default if unavailable.
    """
    value = os.getenv(name)
    if value is not None:
        try:
            return float(value)
        except ValueError:
            print(
                f"Warning: Invalid float value for {name}='{value}', using default {default}"
            )
    return default


def _get_env_str(name: str, default: str) -> str:
    """Retrieve a string value from an environment variable (unset -> default)."""
    value = os.getenv(name)
    return default if value is None else value


# Session expiry proximity & refresh pacing
SESSION_REFRESH_THRESHOLD_SECONDS = _get_env_int(
    "SESSION_REFRESH_THRESHOLD_SECONDS", 300
)  # Refresh when fewer than this many seconds remain (5 min default)
SESSION_REFRESH_COOLDOWN_SECONDS = _get_env_float(
    "SESSION_REFRESH_COOLDOWN_SECONDS", 10.0
)  # Minimum spacing between refresh attempts (provider reuse-prevention interval)

# Provider HTTP exchange
SESSION_REFRESH_HTTP_TIMEOUT_SECONDS = _get_env_float(
    "SESSION_REFRESH_HTTP_TIMEOUT_SECONDS", 30.0
)  # Total timeout applied to a single token exchange request

# Persistence keys
SESSION_STORAGE_KEY_PREFIX = _get_env_str("SESSION_STORAGE_KEY_PREFIX", "")
ACCESS_TOKEN_KEY = "access_token"
REFRESH_TOKEN_KEY = "refresh_token"
SESSION_EXPIRY_KEY = "session_expiry"
PKCE_VERIFIER_KEY = "pkce_verifier"
OAUTH_RETURN_URL_KEY = "oauth_return_url"

# Default on-disk store used by the command line entry point
SESSION_STORE_FILE = _get_env_str("SESSION_STORE_FILE", "session_store.json")

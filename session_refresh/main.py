#!/usr/bin/env python3
"""
Command line entry point for the session refresh coordinator

Commands:
    status          Show the stored session and whether it is due for refresh.
    refresh         Refresh through the coordinator if due (or forced with --force).
    clear           Remove the stored session.
    --health-check  Verify provider settings and store readability.
"""

import asyncio
import logging
import sys

import aiohttp

from .auth import RefreshClient
from .config import ProviderSettings
from .constants import ACCESS_TOKEN_KEY, SESSION_STORE_FILE
from .errors.handling import log_error
from .logging_config import LoggerConfigurator, error_aggregator
from .session import RefreshCoordinator, RefreshOutcome, SessionStore
from .storage import JsonFileKeyValueStore
from .utils import format_duration, format_expiry, utc_now

COMMANDS = ("status", "refresh", "clear", "--health-check")


def build_store(path: str = SESSION_STORE_FILE) -> SessionStore:
    return SessionStore(JsonFileKeyValueStore(path))


async def show_status(store: SessionStore) -> int:
    stored = await store.get_stored_session()
    if stored is None:
        logging.info("🔒 No stored session (sign-in required)")
        return 1
    coordinator = RefreshCoordinator(store)
    remaining = (
        (stored.expires_at - utc_now()).total_seconds() if stored.expires_at else None
    )
    due = coordinator.should_refresh(stored.expires_at)
    logging.info(
        f"🔑 Stored session expires={format_expiry(stored.expires_at)} "
        f"remaining={format_duration(remaining)} refresh_due={due}"
    )
    return 0


async def run_refresh(store: SessionStore, settings: ProviderSettings, force: bool) -> int:
    problems = settings.validate()
    if problems:
        for problem in problems:
            logging.error(f"❌ {problem}")
        return 1
    coordinator = RefreshCoordinator(store)
    async with aiohttp.ClientSession() as http_session:
        client = RefreshClient(settings, http_session)
        operation = client.operation_for(store)
        if force:
            result = await coordinator.attempt_refresh(operation)
            session = result.session
            if result.outcome is not RefreshOutcome.REFRESHED:
                logging.warning(f"⚠️ Forced refresh outcome={result.outcome.value}")
        else:
            session = await coordinator.ensure_fresh(operation)
    if session is None:
        logging.error("❌ No usable session; re-authentication required")
        return 1
    logging.info(f"✅ Session ready (expires: {format_expiry(session.expires_at)})")
    return 0


async def clear(store: SessionStore) -> int:
    return 0 if await store.clear_session() else 1


async def health_check(store: SessionStore, settings: ProviderSettings) -> int:
    problems = settings.validate()
    for problem in problems:
        logging.error(f"❌ Health check: {problem}")
    try:
        await store.storage.get(store.key(ACCESS_TOKEN_KEY))
    except Exception as e:  # noqa: BLE001
        log_error("Health check store read failed", e)
        return 1
    if problems:
        return 1
    logging.info("✅ Health check passed")
    return 0


async def main(argv: list[str]) -> int:
    """Dispatch a command; returns the process exit code."""
    command = argv[0] if argv else "status"
    if command not in COMMANDS:
        logging.error(f"❌ Unknown command {command!r}; expected one of {', '.join(COMMANDS)}")
        return 1
    store = build_store()
    settings = ProviderSettings.from_env()
    if command == "status":
        return await show_status(store)
    if command == "refresh":
        return await run_refresh(store, settings, force="--force" in argv[1:])
    if command == "clear":
        return await clear(store)
    return await health_check(store, settings)


def run() -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: With the command's exit code.
    """
    LoggerConfigurator().configure()
    code = 1
    try:
        code = asyncio.run(main(sys.argv[1:]))
    except KeyboardInterrupt:
        code = 0
    except Exception as e:
        log_error("Top-level error", e)
    finally:
        if error_aggregator.get_error_summary():
            logging.info("📊 Final error summary before shutdown:")
            error_aggregator.log_summary_report()
    sys.exit(code)


if __name__ == "__main__":
    run()

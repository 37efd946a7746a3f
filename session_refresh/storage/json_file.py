"""JSON file backed key-value store.

Blocking file I/O runs inside ``run_in_executor`` behind an ``asyncio.Lock``.
Across instances and processes, a persistent ``<path>.lock`` file is held
with ``fcntl.flock`` (shared for reads, exclusive for the whole
read-modify-write cycle). Writes are atomic: a temp file in the same
directory is fsynced and renamed over the target.
"""

from __future__ import annotations

import asyncio
import fcntl
import json
import logging
import os
import stat
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..errors.internal import StorageError


class JsonFileKeyValueStore:
    """KeyValueStore persisting a flat ``{key: value}`` JSON object on disk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        if not isinstance(path, str | os.PathLike):
            raise TypeError("path must be str or os.PathLike")
        self.path = str(path)
        self.lock_path = f"{self.path}.lock"
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        data = await self._run(self._read)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        await self._run(self._update, key, value)

    async def remove(self, key: str) -> None:
        await self._run(self._update, key, None)

    async def _run(self, func: Any, *args: Any) -> Any:
        loop = asyncio.get_running_loop()
        async with self._lock:
            try:
                return await loop.run_in_executor(None, func, *args)
            except StorageError:
                raise
            except (OSError, ValueError, TypeError) as e:
                raise StorageError(
                    f"{type(e).__name__}: {e}", data={"path": self.path}
                ) from e

    @contextmanager
    def _file_lock(self, exclusive: bool) -> Iterator[None]:
        """Hold an ``fcntl`` lock on the sibling ``.lock`` file.

        The lock file is created once (0600) and never unlinked, so every
        process and store instance on this path locks the same inode.
        """
        fd = os.open(self.lock_path, os.O_RDWR | os.O_CREAT, 0o600)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
            try:
                yield
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)

    def _read(self) -> dict[str, Any]:
        store_dir = os.path.dirname(self.path)
        if store_dir and not os.path.isdir(store_dir):
            return {}
        with self._file_lock(exclusive=False):
            return self._load()

    def _load(self) -> dict[str, Any]:
        """Read the whole file; a missing file is an empty store.

        Raises:
            StorageError: If the file holds something other than a JSON object.
            OSError: If the file cannot be read.
            ValueError: If the file is not valid JSON.
        """
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise StorageError(
                "Store file does not contain a JSON object", data={"path": self.path}
            )
        return data

    def _update(self, key: str, value: str | None) -> None:
        self._prepare_dir()
        # Load, modify and write under one exclusive lock so writers from
        # other instances or processes cannot drop each other's keys.
        with self._file_lock(exclusive=True):
            data = self._load()
            if value is None:
                if key not in data:
                    return
                del data[key]
            else:
                if data.get(key) == value:
                    return
                data[key] = value
            self._atomic_write(data)

    def _prepare_dir(self) -> None:
        """Create the parent directory (0755) if it doesn't exist."""
        store_dir = os.path.dirname(self.path)
        if store_dir and not os.path.exists(store_dir):
            os.makedirs(store_dir, exist_ok=True)
            try:
                current_mode = stat.S_IMODE(os.lstat(store_dir).st_mode)
                if current_mode != 0o755:
                    os.chmod(store_dir, 0o755)
            except (PermissionError, FileNotFoundError):
                pass

    def _atomic_write(self, data: dict[str, Any]) -> None:
        """Perform atomic write of the store contents.

        Must be called with the exclusive file lock held.

        Args:
            data: Complete key-value mapping to write.
        """
        store_path = Path(self.path)
        temp_path: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                dir=store_path.parent,
                prefix=f".{store_path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            ) as tmp:
                temp_path = tmp.name
                json.dump(data, tmp, indent=2, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())
            # Tokens are credentials: owner read/write only
            os.chmod(temp_path, 0o600)
            os.replace(temp_path, self.path)
            temp_path = None
            logging.debug(f"💾 Session store saved keys={len(data)}")
        except (OSError, ValueError, TypeError) as e:
            logging.error(f"💥 Atomic store save failed: {type(e).__name__}")
            raise
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.unlink(temp_path)
                except OSError:
                    pass

"""Key-value persistence backends for the session store adapter."""

from .json_file import JsonFileKeyValueStore
from .memory import MemoryKeyValueStore
from .protocols import KeyValueStore

__all__ = ["JsonFileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]

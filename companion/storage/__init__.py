"""Persistent key-value stores for the companion service."""

from .options_store import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore

__all__ = ["FileKeyValueStore", "KeyValueStore", "MemoryKeyValueStore"]

"""
Persistence Adapters - Data Storage

This package contains the key-value stores used for cached rates and
favorites:
- File-based storage (single JSON document, atomic writes)
- In-memory storage
"""

from fxwidget.adapters.persistence.file_store import JsonFileStore, KeyValueStore, MemoryStore

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]

"""
File Store - Persistent Key-Value Storage

This module provides the key-value collaborator used for cached rates and
favorites. JsonFileStore keeps every key in one JSON document on disk and
rewrites it atomically on each set; MemoryStore keeps values in a dict.

Values are JSON-compatible (dicts, lists, strings, numbers). Nothing here
validates record shapes; readers do that on load.

Files that USE this module:
- fxwidget.application.rate_cache (RateCache reads/writes the rates record)
- fxwidget.application.favorites (FavoritesStore reads/writes the favorites list)
- fxwidget.app (builds the JsonFileStore from settings)

Files that this module USES:
- fxwidget.config (settings for the storage path)
"""
from __future__ import annotations

import copy
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Protocol

from fxwidget.config import settings

log = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Persistent key-value collaborator."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store; values are deep-copied in and out like a JSON round trip."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """Store every key in a single JSON document on disk."""

    def __init__(self, path: Optional[Path] = None):
        """
        Initialize file store.

        Args:
            path: Path to the JSON document (defaults to settings.storage_file)
        """
        self.path = Path(path or settings.storage_file)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def _read(self) -> Dict[str, Any]:
        """
        Load the whole document.

        A document that is not valid JSON (or not a JSON object) is backed up
        to *.corrupt, removed, and treated as empty.
        """
        if not self.path.exists():
            return {}

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._quarantine(f"JSON decode error: {e}")
            return {}

        if not isinstance(data, dict):
            self._quarantine(f"top-level value is {type(data).__name__}, expected object")
            return {}
        return data

    def _quarantine(self, reason: str) -> None:
        backup_path = self.path.with_suffix(self.path.suffix + ".corrupt")
        try:
            shutil.copy2(self.path, backup_path)
            self.path.unlink()
            log.warning("Store file corrupted (%s), backed up to %s", reason, backup_path)
        except OSError as backup_error:
            log.error("Failed to back up corrupt store file %s: %s", self.path, backup_error)

    def _write(self, data: Dict[str, Any]) -> None:
        """
        Write the document using temp file + atomic rename.

        Raises:
            RuntimeError: If the document could not be written
        """
        temp_fd, temp_path = tempfile.mkstemp(
            suffix=".json.tmp",
            dir=str(self.path.parent),
            text=True,
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
                f.flush()
                os.fsync(f.fileno())

            os.replace(temp_path, str(self.path))
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise RuntimeError(f"Failed to save store file: {e}") from e

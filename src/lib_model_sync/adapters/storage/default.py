"""Key-value persistence adapters.

Purpose
-------
Implement the :class:`lib_model_sync.application.ports.KeyValueStore` protocol
for the two places state can live: process memory (tests, embedding) and a
single JSON file on disk shared by the settings and cache records.

Contents
--------
* :class:`MemoryStore` – dictionary-backed store.
* :class:`JsonFileStore` – JSON object file with atomic replacement on write.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from ...observability import log_debug, log_error


class MemoryStore:
    """Keep values in a dictionary for the lifetime of the object.

    Examples
    --------
    >>> store = MemoryStore()
    >>> store.set("k", "v"); store.get("k")
    'v'
    >>> store.delete("k"); store.delete("k"); store.get("k") is None
    True
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class JsonFileStore:
    """Persist values in one JSON object file.

    The file is re-read on every access so separate processes (for example two
    CLI invocations) observe each other's writes. Writes go to a temporary file
    in the same directory which then replaces the target.
    """

    def __init__(self, path: str | Path) -> None:
        """Remember the state file *path*; the file is created lazily on first write."""

        self.path = Path(path)

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        values = self._read()
        if key in values:
            del values[key]
            self._write(values)

    def _read(self) -> dict[str, object]:
        """Return the stored object; a missing or unreadable file reads as empty."""

        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            log_error("state_unreadable", source="storage", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            log_error("state_unreadable", source="storage", path=str(self.path), error="not an object")
            return {}
        return data

    def _write(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_name = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(handle, "w", encoding="utf-8") as stream:
                json.dump(values, stream, indent=2, sort_keys=True)
            os.replace(temp_name, self.path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
        log_debug("state_written", source="storage", path=str(self.path), keys=sorted(values))

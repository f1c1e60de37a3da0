"""Persisted connection settings.

Purpose
-------
Own the repository coordinates and credential the remote client reads on every
fetch. Saving or clearing settings invalidates the result cache, since cached
models belong to the previous coordinates.
"""

from __future__ import annotations

import json

from ..domain.model import ConnectionSettings
from ..observability import log_error, log_info
from .cache import ResultCache
from .ports import KeyValueStore

SETTINGS_KEY = "github_settings"


class SettingsStore:
    """Read and write :class:`~lib_model_sync.domain.model.ConnectionSettings`."""

    def __init__(self, store: KeyValueStore, *, cache: ResultCache | None = None) -> None:
        self._store = store
        self._cache = cache

    def get(self) -> ConnectionSettings | None:
        """Return the stored settings, or ``None`` when absent or unreadable."""

        raw = self._store.get(SETTINGS_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("settings record is not an object")
            return ConnectionSettings.from_dict(data)
        except ValueError as exc:
            log_error("settings_unreadable", source="settings", path=None, error=str(exc))
            return None

    def save(self, settings: ConnectionSettings) -> None:
        """Persist *settings* and drop any cached models."""

        self._store.set(SETTINGS_KEY, json.dumps(settings.to_dict()))
        if self._cache is not None:
            self._cache.invalidate()
        log_info("settings_saved", source="settings", path=settings.config_path, repo=settings.identity)

    def clear(self) -> None:
        """Forget the settings and the cache (disconnect)."""

        self._store.delete(SETTINGS_KEY)
        if self._cache is not None:
            self._cache.invalidate()
        log_info("settings_cleared", source="settings", path=None)

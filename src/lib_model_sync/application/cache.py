"""Time-to-live cache for the last fetched model list.

Purpose
-------
Avoid redundant remote fetches. The cache holds a single entry (the last
successful fetch) together with the repository identity it belongs to, so a
settings change never serves another repository's models.

Contents
--------
* :data:`CACHE_KEY` / :data:`DEFAULT_TTL` – storage key and freshness window.
* :class:`ResultCache` – ``get``/``put``/``invalidate`` over a
  :class:`~lib_model_sync.application.ports.KeyValueStore`.

Semantics
---------
``get`` reports a hit only when the stored identity matches and the entry is at
most :data:`DEFAULT_TTL` old. Stale or foreign entries are left in place (the
next ``put`` overwrites them); only :meth:`ResultCache.invalidate` deletes.
"""

from __future__ import annotations

import json
from datetime import timedelta

from ..domain.model import CacheEntry, Model, parse_timestamp, utc_now
from ..observability import log_debug, log_error, log_info
from .normalize import normalize_records
from .ports import Clock, KeyValueStore

CACHE_KEY = "github_cache"
DEFAULT_TTL = timedelta(minutes=5)


class ResultCache:
    """Single-slot cache keyed by repository identity (``owner/name``)."""

    def __init__(self, store: KeyValueStore, *, ttl: timedelta = DEFAULT_TTL, clock: Clock = utc_now) -> None:
        self._store = store
        self.ttl = ttl
        self._clock = clock

    def get(self, identity: str) -> list[Model] | None:
        """Return the cached models for *identity* while they are fresh, else ``None``."""

        entry = self.entry()
        if entry is None:
            log_debug("cache_miss", source="cache", path=None, repo=identity)
            return None
        if entry.repo_url != identity:
            log_debug("cache_miss", source="cache", path=None, repo=identity, cached_repo=entry.repo_url)
            return None
        age = self._clock() - entry.last_fetched
        if age > self.ttl:
            log_debug("cache_stale", source="cache", path=None, repo=identity, age_seconds=age.total_seconds())
            return None
        log_debug("cache_hit", source="cache", path=None, repo=identity, models=len(entry.models))
        return list(entry.models)

    def put(self, identity: str, models: list[Model]) -> CacheEntry:
        """Store *models* for *identity* stamped with the current time."""

        entry = CacheEntry(models=list(models), last_fetched=self._clock(), repo_url=identity)
        self._store.set(CACHE_KEY, json.dumps(entry.to_dict()))
        log_info("cache_stored", source="cache", path=None, repo=identity, models=len(models))
        return entry

    def invalidate(self) -> None:
        """Drop the cached entry unconditionally."""

        self._store.delete(CACHE_KEY)
        log_info("cache_invalidated", source="cache", path=None)

    def entry(self) -> CacheEntry | None:
        """Return the persisted entry regardless of age or identity.

        Unreadable records behave as if nothing were cached.
        """

        raw = self._store.get(CACHE_KEY)
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            models = data["models"]
            if not isinstance(models, list):
                raise TypeError("models is not a list")
            return CacheEntry(
                models=normalize_records(models),
                last_fetched=parse_timestamp(data["lastFetched"]),
                repo_url=str(data["repoUrl"]),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            log_error("cache_unreadable", source="cache", path=None, error=str(exc))
            return None

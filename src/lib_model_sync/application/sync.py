"""Remote model configuration retrieval.

Purpose
-------
Orchestrate a fetch end to end: consult the result cache, retrieve the
configured file, decode it with the format its extension selects, normalize
every record, and cache the canonical list. A companion client fetches
auxiliary files (model cards, scripts) referenced by the models.

Contents
--------
* :class:`RemoteConfigClient` – ``fetch(settings)`` returning canonical models.
* :class:`FileContentClient` – ``fetch_file_content(path)`` for referenced files.

Error Mapping
-------------
The fetcher reports unsuccessful statuses as ``TransportError``; this module
narrows them: 404 → ``ConfigNotFound``/``FileNotFound``, and for the config file
401 → ``InvalidCredential`` and 403 → ``RateLimitedOrDenied``. Nothing is
retried.
"""

from __future__ import annotations

from typing import Callable

from ..domain.errors import (
    ConfigNotFound,
    FileNotFound,
    InvalidCredential,
    NotConfigured,
    RateLimitedOrDenied,
    SyncError,
    TransportError,
)
from ..domain.model import ConnectionSettings, Model, format_timestamp, utc_now
from ..observability import log_error, log_info, make_event
from .cache import ResultCache
from .normalize import normalize_records
from .ports import Clock, ContentFetcher, RecordDecoder


class RemoteConfigClient:
    """Fetch and canonicalise the model list a repository publishes.

    Parameters
    ----------
    fetcher:
        Transport returning file text for a settings/path pair.
    cache:
        Result cache consulted before and updated after each remote fetch.
    select_decoder:
        Callable returning the decoder for a config path (by extension).
    clock:
        Source of the timestamp used for records without creation/update times.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        cache: ResultCache,
        *,
        select_decoder: Callable[[str], RecordDecoder],
        clock: Clock = utc_now,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._select_decoder = select_decoder
        self._clock = clock

    async def fetch(self, settings: ConnectionSettings) -> list[Model]:
        """Return the canonical models configured by *settings*.

        Cached models for the same repository identity are returned without
        any I/O while they are fresh. Concurrent calls are not coalesced; the
        last one to finish wins the cache slot.

        Raises
        ------
        ConfigNotFound, InvalidCredential, RateLimitedOrDenied, TransportError
            When the remote refuses the request.
        MalformedConfig
            When the file does not hold a list of records.
        """

        identity = settings.identity
        cached = self._cache.get(identity)
        if cached is not None:
            return cached

        path = settings.config_path
        try:
            text = await self._fetcher.fetch_text(settings, path)
        except TransportError as exc:
            narrowed = _config_error(exc, path)
            if narrowed is None:
                raise
            raise narrowed from exc

        records = self._select_decoder(path).decode(text, path=path)
        models = normalize_records(records, now=format_timestamp(self._clock()))
        self._cache.put(identity, models)
        log_info("models_fetched", **make_event("remote", path, {"repo": identity, "models": len(models)}))
        return models


class FileContentClient:
    """Fetch auxiliary repository files using the active connection settings.

    *settings* is a callable (typically :meth:`SettingsStore.get` or the
    environment-aware resolver of :class:`lib_model_sync.core.Session`) so the
    client always sees the current coordinates.
    """

    def __init__(self, fetcher: ContentFetcher, settings: Callable[[], ConnectionSettings | None]) -> None:
        """Keep *fetcher* and the *settings* provider consulted on every call."""

        self._fetcher = fetcher
        self._settings = settings

    async def fetch_file_content(self, path: str) -> str:
        """Return the text of *path* from the configured repository.

        Raises
        ------
        NotConfigured
            When no connection settings are stored.
        FileNotFound
            When the remote answers 404.
        TransportError
            For every other unsuccessful response.
        """

        settings = self._settings()
        if settings is None:
            raise NotConfigured()
        try:
            return await self._fetcher.fetch_text(settings, path)
        except TransportError as exc:
            if exc.status_code == 404:
                raise FileNotFound(path) from exc
            if exc.status_code is None:
                raise
            raise TransportError(exc.status_code, f"Failed to fetch file: {exc.status_code}") from exc


def _config_error(exc: TransportError, path: str) -> SyncError | None:
    """Return the narrower error for a failed config fetch, or ``None`` to re-raise *exc*."""

    log_error("config_fetch_failed", source="remote", path=path, status=exc.status_code)
    if exc.status_code == 404:
        return ConfigNotFound(path)
    if exc.status_code == 401:
        return InvalidCredential()
    if exc.status_code == 403:
        return RateLimitedOrDenied()
    return None

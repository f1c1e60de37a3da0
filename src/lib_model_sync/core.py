"""Composition root for ``lib_model_sync``.

Purpose
-------
Wire the default adapters (JSON state file, GitHub transport, environment
overrides, decoders) into the cache, settings store, and clients, and expose
the flows an application runs: load models with local fallback, refresh,
disconnect, and strict fetches.

Contents
--------
* :class:`ConnectionStatus` / :class:`LoadResult` – outcome of a load.
* :class:`Session` – the wired object graph; created by :func:`open_session`.
* :func:`resolve_settings` – stored settings overlaid with environment values.
* :func:`load_models` / :func:`refresh_models` / :func:`disconnect` – app flows.
* :func:`fetch_models` – strict remote fetch that propagates errors.
* :func:`check_connection` – fetch for candidate settings without saving them.
* :func:`decode_file` / :func:`default_local_models` – local data sources.

System Role
-----------
Nothing in the application layer reaches for module-level state: every store is
created here and injected, so the process entry point (the CLI or an embedding
application) owns the lifecycle.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping

import httpx

from .adapters.decoders.structured import decode_records, decoder_for
from .adapters.decoders.yaml_subset import decode_yaml_subset
from .adapters.env.default import DefaultEnvLoader, default_env_prefix
from .adapters.github.contents import DEFAULT_API_ROOT, GitHubContentsClient
from .adapters.path_resolvers.default import STATE_FILENAME, DefaultStatePathResolver
from .adapters.storage.default import JsonFileStore
from .application.cache import ResultCache
from .application.catalog import LocalModelRepository
from .application.normalize import normalize_records
from .application.ports import Clock, ContentFetcher, KeyValueStore
from .application.settings import SettingsStore
from .application.sync import FileContentClient, RemoteConfigClient
from .domain.errors import NotConfigured, SyncError
from .domain.model import ConnectionSettings, Model, utc_now
from .examples.generate import SAMPLE_MODELS_YAML
from .observability import bind_trace_id, log_error, log_info, make_event

VENDOR = "lib_model_sync"
APP = "ModelSync"
SLUG = "lib-model-sync"

# Environment suffixes (after the ``LIB_MODEL_SYNC_`` prefix) mapped onto the
# persisted settings record.
_ENV_SETTINGS_FIELDS = {
    "repo_owner": "repoOwner",
    "repo_name": "repoName",
    "branch": "branch",
    "config_path": "configPath",
    "token": "token",
}


class ConnectionStatus(str, Enum):
    """Which data source the last load ended up using."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class LoadResult:
    """Models to display plus the connection outcome that produced them."""

    models: list[Model]
    status: ConnectionStatus
    error: str | None = None


@dataclass(slots=True)
class Session:
    """Wired object graph for one process.

    Attributes
    ----------
    store:
        Key-value persistence shared by the cache and settings store.
    cache / settings:
        Result cache and settings store over :attr:`store`.
    remote:
        Client fetching the configured model list.
    fetcher:
        Transport used by :attr:`remote` and :attr:`files`.
    local:
        Local catalogue used when the remote is unavailable.
    overrides:
        Environment values (lower-case suffixes) layered over stored settings.
    files:
        Auxiliary file client bound to :meth:`active_settings`.
    """

    store: KeyValueStore
    cache: ResultCache
    settings: SettingsStore
    remote: RemoteConfigClient
    fetcher: ContentFetcher
    local: LocalModelRepository
    overrides: dict[str, str] = field(default_factory=dict)
    files: FileContentClient = field(init=False)

    def __post_init__(self) -> None:
        self.files = FileContentClient(self.fetcher, self.active_settings)

    def active_settings(self) -> ConnectionSettings | None:
        """Return stored settings overlaid with environment overrides."""

        return resolve_settings(self.settings.get(), self.overrides)


def open_session(
    state_dir: str | Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = utc_now,
    store: KeyValueStore | None = None,
) -> Session:
    """Create a :class:`Session` with the default adapters.

    Parameters
    ----------
    state_dir:
        Directory for ``state.json``; defaults to the platform state directory
        (see :class:`~lib_model_sync.adapters.path_resolvers.default.DefaultStatePathResolver`).
    environ:
        Environment mapping for overrides; defaults to :data:`os.environ`.
    transport:
        Optional :mod:`httpx` transport (tests pass :class:`httpx.MockTransport`).
    clock:
        Source of "now" for cache ages and default timestamps.
    store:
        Explicit key-value store; takes precedence over *state_dir*.

    Examples
    --------
    >>> from lib_model_sync.adapters.storage.default import MemoryStore
    >>> session = open_session(environ={}, store=MemoryStore())
    >>> session.active_settings() is None
    True
    """

    env = os.environ if environ is None else environ
    overrides = DefaultEnvLoader(environ=env).load(default_env_prefix(SLUG))
    if store is None:
        store = JsonFileStore(_state_file(state_dir, env))
    cache = ResultCache(store, clock=clock)
    settings = SettingsStore(store, cache=cache)
    fetcher = GitHubContentsClient(api_root=overrides.get("api_root", DEFAULT_API_ROOT), transport=transport)
    remote = RemoteConfigClient(fetcher, cache, select_decoder=decoder_for, clock=clock)
    return Session(
        store=store,
        cache=cache,
        settings=settings,
        remote=remote,
        fetcher=fetcher,
        local=LocalModelRepository(default_local_models()),
        overrides=overrides,
    )


def resolve_settings(stored: ConnectionSettings | None, overrides: Mapping[str, str]) -> ConnectionSettings | None:
    """Overlay environment *overrides* on *stored* settings.

    Returns ``None`` unless both repository owner and name are known.

    Examples
    --------
    >>> resolve_settings(None, {"repo_owner": "acme", "repo_name": "models", "token": "t"}).token
    't'
    >>> resolve_settings(None, {"repo_owner": "acme"}) is None
    True
    """

    record: dict[str, str] = stored.to_dict() if stored is not None else {}
    for suffix, key in _ENV_SETTINGS_FIELDS.items():
        if suffix in overrides:
            record[key] = overrides[suffix]
    try:
        return ConnectionSettings.from_dict(record)
    except ValueError:
        return None


async def load_models(session: Session, *, trace_id: str | None = None) -> LoadResult:
    """Load the active model list, falling back to the local catalogue on failure.

    Without settings the local catalogue is returned as ``DISCONNECTED``. A
    remote failure never escapes: the local catalogue is returned as ``ERROR``
    with the failure message.
    """

    bind_trace_id(trace_id)
    settings = session.active_settings()
    if settings is None:
        log_info("models_loaded", **make_event("local", None, {"status": ConnectionStatus.DISCONNECTED.value}))
        return LoadResult(session.local.models(), ConnectionStatus.DISCONNECTED)
    try:
        models = await session.remote.fetch(settings)
    except SyncError as exc:
        log_error("models_fallback", **make_event("local", settings.config_path, {"error": str(exc)}))
        return LoadResult(session.local.models(), ConnectionStatus.ERROR, str(exc))
    log_info("models_loaded", **make_event("remote", settings.config_path, {"models": len(models)}))
    return LoadResult(models, ConnectionStatus.CONNECTED)


async def refresh_models(session: Session, *, trace_id: str | None = None) -> LoadResult:
    """Invalidate the cache and load again."""

    session.cache.invalidate()
    return await load_models(session, trace_id=trace_id)


def disconnect(session: Session) -> None:
    """Forget stored settings and cached models."""

    session.settings.clear()


async def fetch_models(session: Session, *, refresh: bool = False) -> list[Model]:
    """Fetch the remote model list, propagating every failure.

    Raises
    ------
    NotConfigured
        When no settings are active.
    """

    settings = session.active_settings()
    if settings is None:
        raise NotConfigured()
    if refresh:
        session.cache.invalidate()
    return await session.remote.fetch(settings)


async def check_connection(session: Session, settings: ConnectionSettings) -> list[Model]:
    """Fetch the model list for *settings* without storing them.

    The cache is dropped before and after the fetch so the remote is always
    contacted and the stored settings never see the candidate's models.
    Failures propagate as :class:`SyncError` subclasses.
    """

    session.cache.invalidate()
    try:
        models = await session.remote.fetch(settings)
    finally:
        session.cache.invalidate()
    log_info("connection_checked", **make_event("remote", settings.config_path, {"models": len(models)}))
    return models


def decode_file(path: str | Path) -> list[Model]:
    """Decode and normalize a local config file (format chosen by extension)."""

    file_path = Path(path)
    text = file_path.read_text(encoding="utf-8")
    return normalize_records(decode_records(text, str(file_path)))


def default_local_models() -> list[Model]:
    """Return the bundled sample catalogue used as the local data source."""

    return normalize_records(decode_yaml_subset(SAMPLE_MODELS_YAML))


def _state_file(state_dir: str | Path | None, env: Mapping[str, str]) -> Path:
    """Return the state file path for *state_dir* or the platform default."""

    if state_dir is not None:
        return Path(state_dir) / STATE_FILENAME
    resolver = DefaultStatePathResolver(vendor=VENDOR, app=APP, slug=SLUG, env=dict(env))
    return resolver.state_file()


__all__ = [
    "ConnectionStatus",
    "LoadResult",
    "Session",
    "open_session",
    "resolve_settings",
    "load_models",
    "refresh_models",
    "disconnect",
    "fetch_models",
    "check_connection",
    "decode_file",
    "default_local_models",
]

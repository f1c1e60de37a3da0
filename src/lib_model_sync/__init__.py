"""Public package surface for ``lib_model_sync``.

Re-exports the composition root, the domain entities, the error taxonomy, and
the logging hooks so applications can ``import lib_model_sync`` without
knowing the internal layering.
"""

from __future__ import annotations

from .application.cache import DEFAULT_TTL, ResultCache
from .application.catalog import LocalModelRepository, filter_models
from .application.normalize import normalize_record, normalize_records
from .application.settings import SettingsStore
from .application.sync import FileContentClient, RemoteConfigClient
from .core import (
    ConnectionStatus,
    LoadResult,
    Session,
    check_connection,
    decode_file,
    default_local_models,
    disconnect,
    fetch_models,
    load_models,
    open_session,
    refresh_models,
    resolve_settings,
)
from .domain.errors import (
    ConfigNotFound,
    FileNotFound,
    InvalidCredential,
    MalformedConfig,
    NotConfigured,
    RateLimitedOrDenied,
    SyncError,
    TransportError,
)
from .domain.model import CacheEntry, ConnectionSettings, Model, ModelFiles, ModelMetrics, ModelStatus
from .observability import bind_trace_id, get_logger

__all__ = [
    "CacheEntry",
    "ConfigNotFound",
    "ConnectionSettings",
    "ConnectionStatus",
    "DEFAULT_TTL",
    "FileContentClient",
    "FileNotFound",
    "InvalidCredential",
    "LoadResult",
    "LocalModelRepository",
    "MalformedConfig",
    "Model",
    "ModelFiles",
    "ModelMetrics",
    "ModelStatus",
    "NotConfigured",
    "RateLimitedOrDenied",
    "RemoteConfigClient",
    "ResultCache",
    "Session",
    "SettingsStore",
    "SyncError",
    "TransportError",
    "bind_trace_id",
    "check_connection",
    "decode_file",
    "default_local_models",
    "disconnect",
    "fetch_models",
    "filter_models",
    "get_logger",
    "load_models",
    "normalize_record",
    "normalize_records",
    "open_session",
    "refresh_models",
    "resolve_settings",
]

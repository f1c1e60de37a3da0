"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts adapters must satisfy so the cache, settings
store, and remote client can be wired without depending on concrete storage or
HTTP implementations.

Contents
--------
* :class:`KeyValueStore` – string persistence for the settings and cache records.
* :class:`ContentFetcher` – retrieves a repository file as text.
* :class:`RecordDecoder` – turns fetched text into raw records.
* :data:`Clock` – callable returning the current aware datetime.

System Role
-----------
These protocols keep the dependency rule intact: the application layer asks for
behaviour through abstractions, and :mod:`lib_model_sync.core` supplies the
default adapters.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Protocol, runtime_checkable

from ..domain.model import ConnectionSettings

Clock = Callable[[], datetime]


@runtime_checkable
class KeyValueStore(Protocol):
    """Persist string values under string keys; missing keys read as ``None``."""

    def get(self, key: str) -> str | None:
        """Return the value stored under *key* or ``None``."""

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    def delete(self, key: str) -> None:
        """Remove *key*; missing keys are ignored."""


@runtime_checkable
class ContentFetcher(Protocol):
    """Retrieve the text of one repository file at the configured ref.

    Implementations raise :class:`~lib_model_sync.domain.errors.TransportError`
    carrying the status code for unsuccessful responses so callers can map it
    onto their own error vocabulary.
    """

    async def fetch_text(self, settings: ConnectionSettings, path: str) -> str:
        """Return the decoded content of *path* in the repository *settings* names."""


@runtime_checkable
class RecordDecoder(Protocol):
    """Parse fetched text into a list of raw records."""

    def decode(self, text: str, *, path: str) -> list[object]:
        """Return the raw records or raise ``MalformedConfig``."""

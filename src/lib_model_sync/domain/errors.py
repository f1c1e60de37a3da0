"""Domain-level exception hierarchy.

Purpose
-------
Expose the error taxonomy shared by the transport adapter, the remote config
client, and consuming applications. The hierarchy lives in the domain layer so
adapters can raise it without the domain depending on them.

Contents
--------
* :class:`SyncError` – umbrella base class for every failure the library raises.
* :class:`ConfigNotFound` / :class:`FileNotFound` – the requested path is absent
  at the configured ref.
* :class:`InvalidCredential` – the remote rejected the token.
* :class:`RateLimitedOrDenied` – the remote answered with *forbidden*.
* :class:`TransportError` – any other non-success status or a network failure.
* :class:`MalformedConfig` – the decoded content is not a list of records.
* :class:`NotConfigured` – an operation needed connection settings but none are
  stored.

System Role
-----------
Callers catch :class:`SyncError` to fall back to the local catalogue and
display ``str(exc)``; messages are written for humans and are part of the
public contract.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base type for all exceptions emitted by ``lib_model_sync``."""


class ConfigNotFound(SyncError):
    """Raised when the configured model file does not exist at the ref.

    Examples
    --------
    >>> str(ConfigNotFound("models.yaml"))
    'Config file not found: models.yaml'
    """

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")
        self.path = path


class FileNotFound(SyncError):
    """Raised when an auxiliary file referenced by a model is missing."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class InvalidCredential(SyncError):
    """Raised when the remote answers *unauthorized* for the supplied token."""

    def __init__(self, message: str = "Invalid GitHub token") -> None:
        super().__init__(message)


class RateLimitedOrDenied(SyncError):
    """Raised when the remote answers *forbidden*.

    GitHub uses the same status for exhausted rate limits and for repositories
    the token cannot see, so the two are not distinguished.
    """

    def __init__(self, message: str = "Rate limited or access denied") -> None:
        super().__init__(message)


class TransportError(SyncError):
    """Raised for any other unsuccessful exchange with the remote.

    ``status_code`` is ``None`` when no response was received at all.

    Examples
    --------
    >>> exc = TransportError(502)
    >>> str(exc), exc.status_code
    ('GitHub API error: 502', 502)
    """

    def __init__(self, status_code: int | None, message: str | None = None) -> None:
        super().__init__(message or f"GitHub API error: {status_code}")
        self.status_code = status_code


class MalformedConfig(SyncError):
    """Raised when fetched content cannot be turned into a list of records."""

    def __init__(self, message: str = "Config file must contain an array of models") -> None:
        super().__init__(message)


class NotConfigured(SyncError):
    """Raised when an operation requires connection settings and none are stored."""

    def __init__(self, message: str = "GitHub not configured") -> None:
        super().__init__(message)

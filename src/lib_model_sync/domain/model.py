"""Domain entities describing tracked machine-learning models.

Purpose
-------
Hold the canonical, fully-defaulted shapes that every other layer exchanges:
the :class:`Model` record produced by normalization, the connection
coordinates persisted by the settings store, and the cache entry written after
a successful fetch. The module performs no I/O.

Contents
--------
* :class:`ModelStatus` – closed lifecycle enumeration.
* :class:`ModelMetrics` / :class:`ModelFiles` – optional member groups.
* :class:`Model` – canonical model record with camel-case serialisation.
* :class:`ConnectionSettings` – repository coordinates and credential.
* :class:`CacheEntry` – last fetched model list with its timestamp and identity.
* :data:`Scalar` / :data:`Record` – the loosely-typed shapes decoders emit.
* :func:`utc_now` / :func:`format_timestamp` / :func:`parse_timestamp` – ISO 8601
  helpers shared by the normalizer and the cache.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Union

Scalar = Union[str, int, float, bool, None]
"""Value produced for a single ``key: value`` pair by the decoders."""

Record = dict[str, Union[Scalar, dict[str, Scalar]]]
"""One decoded model entry: scalars plus at most one level of nested mappings."""

DEFAULT_BRANCH = "main"
DEFAULT_CONFIG_PATH = "models.yaml"


class ModelStatus(str, Enum):
    """Lifecycle stage of a model."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    ARCHIVED = "archived"


@dataclass(frozen=True, slots=True)
class ModelMetrics:
    """Evaluation figures; each member is independently optional.

    ``accuracy`` is a fraction in ``[0, 1]`` and ``latency`` is in milliseconds.
    """

    accuracy: float | None = None
    latency: float | None = None

    def to_dict(self) -> dict[str, float]:
        """Return only the members that are set."""

        payload: dict[str, float] = {}
        if self.accuracy is not None:
            payload["accuracy"] = self.accuracy
        if self.latency is not None:
            payload["latency"] = self.latency
        return payload


_FILE_KEYS: tuple[tuple[str, str], ...] = (
    ("model_card", "modelCard"),
    ("training_script", "trainingScript"),
    ("feature_script", "featureScript"),
    ("inference_script", "inferenceScript"),
    ("model_file", "modelFile"),
)


@dataclass(frozen=True, slots=True)
class ModelFiles:
    """Repository-relative paths to files that document or implement a model."""

    model_card: str | None = None
    training_script: str | None = None
    feature_script: str | None = None
    inference_script: str | None = None
    model_file: str | None = None

    def to_dict(self) -> dict[str, str]:
        """Return the set members keyed by their persisted camel-case names."""

        payload: dict[str, str] = {}
        for attribute, key in _FILE_KEYS:
            value = getattr(self, attribute)
            if value is not None:
                payload[key] = value
        return payload


def file_keys() -> tuple[tuple[str, str], ...]:
    """Return ``(attribute, persisted_key)`` pairs for :class:`ModelFiles`."""

    return _FILE_KEYS


@dataclass(frozen=True, slots=True)
class Model:
    """Canonical model record.

    Every member except :attr:`metrics` and :attr:`files` is always populated
    after normalization.

    Examples
    --------
    >>> model = Model(
    ...     id="m1", name="Churn", version="1.0.0", description="", framework="sklearn",
    ...     status=ModelStatus.STAGING, owner="ml", created_at="2024-01-01T00:00:00.000Z",
    ...     updated_at="2024-01-02T00:00:00.000Z", metrics=ModelMetrics(accuracy=0.9),
    ... )
    >>> model.to_dict()["status"], model.to_dict()["metrics"]
    ('staging', {'accuracy': 0.9})
    """

    id: str
    name: str
    version: str
    description: str
    framework: str
    status: ModelStatus
    owner: str
    created_at: str
    updated_at: str
    metrics: ModelMetrics | None = None
    files: ModelFiles | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the persisted camel-case record shape."""

        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "description": self.description,
            "framework": self.framework,
            "status": self.status.value,
            "owner": self.owner,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.metrics is not None:
            payload["metrics"] = self.metrics.to_dict()
        if self.files is not None:
            payload["files"] = self.files.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class ConnectionSettings:
    """Coordinates of the remote configuration file.

    Examples
    --------
    >>> settings = ConnectionSettings(repo_owner="acme", repo_name="models")
    >>> settings.identity, settings.branch, settings.config_path
    ('acme/models', 'main', 'models.yaml')
    """

    repo_owner: str
    repo_name: str
    branch: str = DEFAULT_BRANCH
    config_path: str = DEFAULT_CONFIG_PATH
    token: str = ""

    @property
    def identity(self) -> str:
        """Return the ``owner/name`` pair the cache is keyed on."""

        return f"{self.repo_owner}/{self.repo_name}"

    def to_dict(self) -> dict[str, str]:
        """Serialise to the persisted settings record."""

        return {
            "repoOwner": self.repo_owner,
            "repoName": self.repo_name,
            "branch": self.branch,
            "configPath": self.config_path,
            "token": self.token,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConnectionSettings":
        """Build settings from a persisted record, raising ``ValueError`` when incomplete.

        Examples
        --------
        >>> ConnectionSettings.from_dict({"repoOwner": "acme", "repoName": "models", "branch": ""}).branch
        'main'
        >>> ConnectionSettings.from_dict({"repoOwner": "acme"})
        Traceback (most recent call last):
        ...
        ValueError: Settings record requires repoOwner and repoName
        """

        owner = data.get("repoOwner")
        name = data.get("repoName")
        if not isinstance(owner, str) or not isinstance(name, str) or not owner or not name:
            raise ValueError("Settings record requires repoOwner and repoName")
        return cls(
            repo_owner=owner,
            repo_name=name,
            branch=_text_or(data.get("branch"), DEFAULT_BRANCH),
            config_path=_text_or(data.get("configPath"), DEFAULT_CONFIG_PATH),
            token=_text_or(data.get("token"), ""),
        )


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Last successfully fetched model list for one repository identity."""

    models: list[Model]
    last_fetched: datetime
    repo_url: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to ``{models, lastFetched, repoUrl}``."""

        return {
            "models": [model.to_dict() for model in self.models],
            "lastFetched": format_timestamp(self.last_fetched),
            "repoUrl": self.repo_url,
        }


def utc_now() -> datetime:
    """Return the current instant as an aware UTC datetime."""

    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render *moment* as ISO 8601 UTC with millisecond precision and a ``Z`` suffix.

    Examples
    --------
    >>> format_timestamp(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
    '2024-05-01T12:30:00.000Z'
    """

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Parse an ISO 8601 string (``Z`` suffix allowed) into an aware datetime.

    Naive values are assumed to be UTC. Raises ``ValueError`` for anything else.

    Examples
    --------
    >>> parse_timestamp('2024-05-01T12:30:00.000Z').isoformat()
    '2024-05-01T12:30:00+00:00'
    """

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def _text_or(value: object, default: str) -> str:
    """Return *value* when it is a non-empty string, otherwise *default*."""

    return value if isinstance(value, str) and value else default

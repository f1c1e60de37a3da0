"""Record normalization into the canonical :class:`~lib_model_sync.domain.model.Model`.

Purpose
-------
Map whatever a decoder produced for one entry (from either format) onto the
fully-defaulted model shape. Normalization is total: malformed or partial
records yield defaults, never exceptions, so one bad entry cannot fail a fetch.

Contents
--------
* :func:`normalize_record` – canonicalise a single decoded record.
* :func:`normalize_records` – canonicalise a list with one shared timestamp.
* Private helpers narrating the per-field rules (``_text``, ``_status``,
  ``_metrics``, ``_files``).

Rules
-----
A value is *blank* when it is missing, ``None``, ``False``, ``""``, zero or NaN;
blank values take the field default. Present scalars are rendered as text,
booleans as ``"true"``, integral floats without a trailing ``.0``. Nested
mappings and lists cannot stand in for text and also take the default.
"""

from __future__ import annotations

import math
from typing import Iterable, Mapping

from ..domain.model import Model, ModelFiles, ModelMetrics, ModelStatus, file_keys, format_timestamp, utc_now

DEFAULT_NAME = "Unnamed Model"
DEFAULT_VERSION = "1.0.0"
DEFAULT_FRAMEWORK = "Unknown"
DEFAULT_OWNER = "Unknown"

_STATUSES = {status.value: status for status in ModelStatus}


def normalize_record(raw: object, index: int, *, now: str | None = None) -> Model:
    """Return the canonical model for *raw*, the entry found at position *index*.

    Parameters
    ----------
    raw:
        Decoded record; anything that is not a mapping is read as an empty one.
    index:
        Position in the source list, used for the ``model-<index>`` placeholder id.
    now:
        ISO 8601 timestamp used when the record carries no creation/update time.
        Defaults to the current instant.

    Examples
    --------
    >>> model = normalize_record({"name": "Churn", "status": "bogus", "metrics": {"accuracy": "high"}}, 3,
    ...                          now="2024-01-01T00:00:00.000Z")
    >>> model.id, model.name, model.status.value, model.metrics
    ('model-3', 'Churn', 'development', ModelMetrics(accuracy=None, latency=None))
    >>> normalize_record(None, 0, now="2024-01-01T00:00:00.000Z").framework
    'Unknown'
    """

    record: Mapping[str, object] = raw if isinstance(raw, Mapping) else {}
    timestamp = now or format_timestamp(utc_now())
    return Model(
        id=_text(record.get("id"), f"model-{index}"),
        name=_text(record.get("name"), DEFAULT_NAME),
        version=_text(record.get("version"), DEFAULT_VERSION),
        description=_text(record.get("description"), ""),
        framework=_text(record.get("framework"), DEFAULT_FRAMEWORK),
        status=_status(record.get("status")),
        owner=_text(record.get("owner"), DEFAULT_OWNER),
        created_at=_text(_first(record, "createdAt", "created_at"), timestamp),
        updated_at=_text(_first(record, "updatedAt", "updated_at"), timestamp),
        metrics=_metrics(record.get("metrics")),
        files=_files(record.get("files")),
    )


def normalize_records(records: Iterable[object], *, now: str | None = None) -> list[Model]:
    """Normalize every entry of *records*, sharing a single default timestamp."""

    timestamp = now or format_timestamp(utc_now())
    return [normalize_record(raw, index, now=timestamp) for index, raw in enumerate(records)]


def _is_blank(value: object) -> bool:
    """Return ``True`` for values that should fall back to the field default.

    Examples
    --------
    >>> [_is_blank(v) for v in (None, "", 0, 0.0, False, "0", [], {})]
    [True, True, True, True, True, False, False, False]
    """

    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def _text(value: object, default: str) -> str:
    """Render *value* as text or return *default* when blank or not a scalar.

    Examples
    --------
    >>> _text(2, "x"), _text(2.0, "x"), _text(2.5, "x"), _text(True, "x"), _text({"a": 1}, "x")
    ('2', '2', '2.5', 'true', 'x')
    """

    if _is_blank(value):
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return default


def _first(record: Mapping[str, object], *keys: str) -> object:
    """Return the first non-blank value stored under one of *keys*."""

    for key in keys:
        value = record.get(key)
        if not _is_blank(value):
            return value
    return None


def _status(value: object) -> ModelStatus:
    """Validate *value* against the closed status set, defaulting to development."""

    if isinstance(value, str) and value in _STATUSES:
        return _STATUSES[value]
    return ModelStatus.DEVELOPMENT


def _number(value: object) -> float | None:
    """Return *value* when it is numeric (booleans excluded), otherwise ``None``."""

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return None


def _metrics(value: object) -> ModelMetrics | None:
    """Build the metrics group when the record supplied one.

    Non-numeric members are dropped rather than coerced to zero.
    """

    if _is_blank(value):
        return None
    source = value if isinstance(value, Mapping) else {}
    return ModelMetrics(accuracy=_number(source.get("accuracy")), latency=_number(source.get("latency")))


def _files(value: object) -> ModelFiles | None:
    """Build the files group when the record supplied one, keeping string paths only."""

    if _is_blank(value):
        return None
    source = value if isinstance(value, Mapping) else {}
    paths = {}
    for attribute, key in file_keys():
        candidate = source.get(key)
        paths[attribute] = candidate if isinstance(candidate, str) else None
    return ModelFiles(**paths)

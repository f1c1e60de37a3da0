"""Local model catalogue and list filtering.

Purpose
-------
Provide the non-remote data source used when no repository is configured or a
remote fetch fails, plus the search/status filter applied to whichever list is
active.

Contents
--------
* :class:`LocalModelRepository` – id-keyed in-memory list with basic editing.
* :func:`filter_models` – substring and status filter.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from ..domain.model import Model, ModelStatus, format_timestamp, utc_now

ALL_STATUSES = "all"


class LocalModelRepository:
    """Keep models in insertion order, addressed by :attr:`Model.id`."""

    def __init__(self, models: Iterable[Model] = ()) -> None:
        self._models: list[Model] = list(models)

    def models(self) -> list[Model]:
        """Return a copy of the current models."""

        return list(self._models)

    def get(self, model_id: str) -> Model | None:
        """Return the model with *model_id* or ``None``."""

        return next((model for model in self._models if model.id == model_id), None)

    def add(self, model: Model) -> Model:
        """Append *model*; ids must be unique within the catalogue."""

        if self.get(model.id) is not None:
            raise ValueError(f"Model {model.id!r} already exists")
        self._models.append(model)
        return model

    def update(self, model: Model) -> Model:
        """Replace the model sharing *model*'s id and refresh its update time."""

        for position, existing in enumerate(self._models):
            if existing.id == model.id:
                updated = replace(model, created_at=existing.created_at, updated_at=format_timestamp(utc_now()))
                self._models[position] = updated
                return updated
        raise KeyError(model.id)

    def delete(self, model_id: str) -> bool:
        """Remove the model with *model_id*; return whether anything was removed."""

        remaining = [model for model in self._models if model.id != model_id]
        removed = len(remaining) != len(self._models)
        self._models = remaining
        return removed


def filter_models(
    models: Iterable[Model],
    *,
    search: str = "",
    status: ModelStatus | str | None = None,
) -> list[Model]:
    """Return the models matching *search* and *status*.

    *search* is matched case-insensitively against name, description, and
    framework. *status* ``None`` or ``"all"`` keeps every status; an unknown
    status matches nothing.

    Examples
    --------
    >>> filter_models([], status="production")
    []
    >>> filter_models([], status="bogus")
    []
    """

    needle = search.lower()
    wanted: ModelStatus | None = None
    if status not in (None, ALL_STATUSES):
        try:
            wanted = ModelStatus(status)
        except ValueError:
            return []
    matches: list[Model] = []
    for model in models:
        if wanted is not None and model.status is not wanted:
            continue
        haystacks = (model.name, model.description, model.framework)
        if needle and not any(needle in text.lower() for text in haystacks):
            continue
        matches.append(model)
    return matches

from __future__ import annotations

import pytest

from lib_model_sync.application.catalog import LocalModelRepository, filter_models
from lib_model_sync.application.normalize import normalize_record
from lib_model_sync.core import default_local_models
from lib_model_sync.domain.model import Model, ModelStatus

NOW = "2024-01-01T00:00:00.000Z"


def _model(model_id: str, **fields: object) -> Model:
    return normalize_record({"id": model_id, **fields}, 0, now=NOW)


@pytest.fixture()
def catalogue() -> list[Model]:
    return [
        _model("a", name="Churn Predictor", framework="XGBoost", status="production"),
        _model("b", name="Fraud", description="Scores card transactions", framework="PyTorch", status="staging"),
        _model("c", name="Forecast", framework="Prophet"),
    ]


@pytest.mark.parametrize("status", [None, "all", "production", "staging", "development", "archived", "bogus"])
def test_filter_on_empty_list_is_empty(status: str | None) -> None:
    assert filter_models([], status=status) == []


def test_filter_by_status(catalogue: list[Model]) -> None:
    assert [model.id for model in filter_models(catalogue, status="staging")] == ["b"]
    assert [model.id for model in filter_models(catalogue, status=ModelStatus.DEVELOPMENT)] == ["c"]
    assert [model.id for model in filter_models(catalogue, status="all")] == ["a", "b", "c"]


def test_unknown_status_matches_nothing(catalogue: list[Model]) -> None:
    assert filter_models(catalogue, status="retired") == []


def test_search_is_case_insensitive_over_name_description_framework(catalogue: list[Model]) -> None:
    assert [model.id for model in filter_models(catalogue, search="churn")] == ["a"]
    assert [model.id for model in filter_models(catalogue, search="CARD")] == ["b"]
    assert [model.id for model in filter_models(catalogue, search="prophet")] == ["c"]
    assert filter_models(catalogue, search="nothing-like-this") == []


def test_search_and_status_combine(catalogue: list[Model]) -> None:
    assert filter_models(catalogue, search="fraud", status="production") == []


def test_repository_add_get_delete() -> None:
    repository = LocalModelRepository()
    repository.add(_model("a"))
    assert repository.get("a") is not None
    assert repository.get("missing") is None
    with pytest.raises(ValueError):
        repository.add(_model("a"))
    assert repository.delete("a") is True
    assert repository.delete("a") is False
    assert repository.models() == []


def test_repository_update_keeps_creation_time() -> None:
    repository = LocalModelRepository([_model("a", name="Old")])
    updated = repository.update(_model("a", name="New", createdAt="1999-01-01T00:00:00.000Z"))
    assert updated.name == "New"
    assert updated.created_at == NOW
    assert updated.updated_at != NOW
    assert repository.get("a") == updated


def test_repository_update_requires_existing_id() -> None:
    with pytest.raises(KeyError):
        LocalModelRepository().update(_model("ghost"))


def test_models_returns_a_copy() -> None:
    repository = LocalModelRepository([_model("a")])
    repository.models().clear()
    assert len(repository.models()) == 1


def test_default_local_models_cover_every_status() -> None:
    models = default_local_models()
    assert [model.id for model in models] == ["churn-predictor", "fraud-detector", "demand-forecast", "sentiment-classifier"]
    assert {model.status for model in models} == set(ModelStatus)
    churn = models[0]
    assert churn.version == "2.1.0"
    assert churn.metrics is not None and churn.metrics.accuracy == 0.91
    assert churn.files is not None and churn.files.model_file == "models/churn/model.json"
    assert models[2].metrics is not None and models[2].metrics.accuracy is None
    assert models[2].files is None

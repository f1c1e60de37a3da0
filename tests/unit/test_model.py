from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone

import pytest

from lib_model_sync.domain.model import (
    CacheEntry,
    ConnectionSettings,
    Model,
    ModelFiles,
    ModelMetrics,
    ModelStatus,
    format_timestamp,
    parse_timestamp,
)


def _model(**overrides: object) -> Model:
    fields: dict[str, object] = {
        "id": "churn",
        "name": "Churn",
        "version": "1.0.0",
        "description": "",
        "framework": "XGBoost",
        "status": ModelStatus.PRODUCTION,
        "owner": "ml",
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-02T00:00:00.000Z",
    }
    fields.update(overrides)
    return Model(**fields)  # type: ignore[arg-type]


def test_model_to_dict_uses_camel_case_and_omits_absent_groups() -> None:
    payload = _model().to_dict()
    assert payload == {
        "id": "churn",
        "name": "Churn",
        "version": "1.0.0",
        "description": "",
        "framework": "XGBoost",
        "status": "production",
        "owner": "ml",
        "createdAt": "2024-01-01T00:00:00.000Z",
        "updatedAt": "2024-01-02T00:00:00.000Z",
    }


def test_model_groups_serialise_only_set_members() -> None:
    model = _model(metrics=ModelMetrics(latency=12), files=ModelFiles(model_card="cards/churn.md"))
    payload = model.to_dict()
    assert payload["metrics"] == {"latency": 12}
    assert payload["files"] == {"modelCard": "cards/churn.md"}


def test_empty_groups_still_serialise() -> None:
    payload = _model(metrics=ModelMetrics(), files=ModelFiles()).to_dict()
    assert payload["metrics"] == {}
    assert payload["files"] == {}


def test_model_is_immutable() -> None:
    model = _model()
    with pytest.raises(AttributeError):
        model.name = "Other"  # type: ignore[misc]


def test_settings_round_trip_through_record() -> None:
    settings = ConnectionSettings("acme", "models", branch="dev", config_path="cfg/models.json", token="t")
    record = settings.to_dict()
    assert record == {
        "repoOwner": "acme",
        "repoName": "models",
        "branch": "dev",
        "configPath": "cfg/models.json",
        "token": "t",
    }
    assert ConnectionSettings.from_dict(record) == settings


def test_settings_defaults_fill_blank_members() -> None:
    settings = ConnectionSettings.from_dict({"repoOwner": "acme", "repoName": "models", "configPath": None})
    assert settings.branch == "main"
    assert settings.config_path == "models.yaml"
    assert settings.token == ""


@pytest.mark.parametrize("record", [{}, {"repoOwner": "acme"}, {"repoOwner": "", "repoName": "x"}, {"repoOwner": 1, "repoName": "x"}])
def test_settings_require_owner_and_name(record: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        ConnectionSettings.from_dict(record)


def test_cache_entry_persisted_shape() -> None:
    entry = CacheEntry(models=[_model()], last_fetched=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc), repo_url="acme/models")
    payload = json.loads(json.dumps(entry.to_dict()))
    assert payload["lastFetched"] == "2024-05-01T12:00:00.000Z"
    assert payload["repoUrl"] == "acme/models"
    assert payload["models"][0]["id"] == "churn"


def test_timestamps_round_trip_with_millisecond_precision() -> None:
    moment = datetime(2024, 5, 1, 12, 0, 1, 123456, tzinfo=timezone.utc)
    text = format_timestamp(moment)
    assert text == "2024-05-01T12:00:01.123Z"
    assert parse_timestamp(text) == moment.replace(microsecond=123000)


def test_format_timestamp_converts_to_utc() -> None:
    moment = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(moment) == "2024-05-01T12:00:00.000Z"


def test_parse_timestamp_treats_naive_values_as_utc() -> None:
    assert parse_timestamp("2024-05-01T12:00:00").tzinfo == timezone.utc


def test_parse_timestamp_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_timestamp("yesterday")

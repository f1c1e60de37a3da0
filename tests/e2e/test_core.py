"""Composition-root flows: load with local fallback, refresh, disconnect."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from lib_model_sync.adapters.storage.default import MemoryStore
from lib_model_sync.core import (
    ConnectionStatus,
    check_connection,
    default_local_models,
    disconnect,
    fetch_models,
    load_models,
    open_session,
    refresh_models,
    resolve_settings,
)
from lib_model_sync.domain.errors import ConfigNotFound, InvalidCredential, NotConfigured
from tests.support import SCENARIO_YAML, FakeGitHub, ManualClock, make_session, settings_for


async def test_without_settings_local_catalogue_is_used() -> None:
    github = FakeGitHub()
    result = await load_models(make_session(github))
    assert result.status is ConnectionStatus.DISCONNECTED
    assert result.error is None
    assert result.models == default_local_models()
    assert github.requests == []


async def test_connected_load_returns_remote_models(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="lib_model_sync")
    session = make_session(FakeGitHub(files={"models.yaml": SCENARIO_YAML}))
    session.settings.save(settings_for())
    result = await load_models(session, trace_id="load-1")
    assert result.status is ConnectionStatus.CONNECTED
    assert [model.id for model in result.models] == ["m1", "m2"]
    loaded = [record for record in caplog.records if record.message == "models_loaded"]
    assert getattr(loaded[-1], "context")["trace_id"] == "load-1"


async def test_remote_failure_falls_back_with_message() -> None:
    session = make_session(FakeGitHub())
    session.settings.save(settings_for(config_path="configs/models.yaml"))
    result = await load_models(session)
    assert result.status is ConnectionStatus.ERROR
    assert result.error == "Config file not found: configs/models.yaml"
    assert result.models == default_local_models()


async def test_refresh_bypasses_fresh_cache() -> None:
    github = FakeGitHub(files={"models.yaml": "- id: v1\n"})
    session = make_session(github)
    session.settings.save(settings_for())
    await load_models(session)
    github.files["models.yaml"] = "- id: v2\n"
    assert [model.id for model in (await load_models(session)).models] == ["v1"]
    assert [model.id for model in (await refresh_models(session)).models] == ["v2"]
    assert len(github.requests) == 2


async def test_disconnect_returns_to_local_mode() -> None:
    session = make_session(FakeGitHub(files={"models.yaml": SCENARIO_YAML}))
    session.settings.save(settings_for())
    await load_models(session)
    disconnect(session)
    assert session.cache.entry() is None
    assert (await load_models(session)).status is ConnectionStatus.DISCONNECTED


async def test_changing_settings_discards_cached_models() -> None:
    github = FakeGitHub(files={"acme/models:models.yaml": "- id: a\n", "acme/next:models.yaml": "- id: b\n"})
    session = make_session(github)
    session.settings.save(settings_for())
    await load_models(session)
    session.settings.save(settings_for(name="next"))
    assert [model.id for model in (await load_models(session)).models] == ["b"]


async def test_fetch_models_is_strict() -> None:
    session = make_session(FakeGitHub())
    with pytest.raises(NotConfigured):
        await fetch_models(session)
    session.settings.save(settings_for())
    with pytest.raises(ConfigNotFound, match="Config file not found: models.yaml"):
        await fetch_models(session)


async def test_fetch_models_refresh_invalidates_first() -> None:
    github = FakeGitHub(files={"models.yaml": "- id: v1\n"})
    session = make_session(github, clock=ManualClock())
    session.settings.save(settings_for())
    await fetch_models(session)
    github.files["models.yaml"] = "- id: v2\n"
    assert [model.id for model in await fetch_models(session, refresh=True)] == ["v2"]


async def test_environment_overrides_stored_settings() -> None:
    github = FakeGitHub(files={"acme/env-repo:models.yaml": "- id: from-env\n"})
    session = make_session(github, environ={"LIB_MODEL_SYNC_REPO_NAME": "env-repo", "LIB_MODEL_SYNC_TOKEN": "tok"})
    session.settings.save(settings_for())
    result = await load_models(session)
    assert [model.id for model in result.models] == ["from-env"]
    assert github.requests[0].headers["Authorization"] == "Bearer tok"


async def test_files_client_uses_active_settings() -> None:
    github = FakeGitHub(files={"cards/a.md": "card"})
    session = make_session(github, environ={"LIB_MODEL_SYNC_REPO_OWNER": "acme", "LIB_MODEL_SYNC_REPO_NAME": "models"})
    assert await session.files.fetch_file_content("cards/a.md") == "card"


def test_resolve_settings_layers_environment() -> None:
    resolved = resolve_settings(settings_for(branch="dev"), {"branch": "release", "config_path": "m.json"})
    assert resolved == settings_for(branch="release", config_path="m.json")
    assert resolve_settings(None, {}) is None


def test_open_session_uses_state_dir(tmp_path: Path) -> None:
    session = open_session(tmp_path, environ={})
    session.settings.save(settings_for())
    assert (tmp_path / "state.json").is_file()
    assert open_session(tmp_path, environ={}).active_settings() == settings_for()


def test_open_session_honours_state_dir_environment(tmp_path: Path) -> None:
    environ = {"LIB_MODEL_SYNC_STATE_DIR": str(tmp_path / "env-state")}
    open_session(environ=environ).settings.save(settings_for())
    assert (tmp_path / "env-state" / "state.json").is_file()


def test_open_session_prefers_explicit_store(tmp_path: Path) -> None:
    store = MemoryStore()
    open_session(tmp_path, environ={}, store=store).settings.save(settings_for())
    assert not (tmp_path / "state.json").exists()
    assert store.get("github_settings") is not None


async def test_oversized_yaml_number_is_kept_as_text() -> None:
    digits = "9" * 5000
    session = make_session(FakeGitHub(files={"models.yaml": f"- id: m1\n  owner: {digits}\n"}))
    session.settings.save(settings_for())
    result = await load_models(session)
    assert result.status is ConnectionStatus.CONNECTED
    assert result.models[0].owner == digits


async def test_oversized_json_number_falls_back_to_local_catalogue() -> None:
    document = '[{"id": "m1", "owner": ' + "9" * 5000 + "}]"
    session = make_session(FakeGitHub(files={"models.json": document}))
    session.settings.save(settings_for(config_path="models.json"))
    result = await load_models(session)
    assert result.status is ConnectionStatus.ERROR
    assert result.error is not None and result.error.startswith("Invalid JSON in models.json")
    assert result.models == default_local_models()


async def test_check_connection_leaves_settings_and_cache_untouched() -> None:
    github = FakeGitHub(files={"models.yaml": SCENARIO_YAML})
    session = make_session(github)
    models = await check_connection(session, settings_for(branch="dev"))
    assert [model.id for model in models] == ["m1", "m2"]
    assert session.active_settings() is None
    assert session.cache.entry() is None


async def test_check_connection_propagates_failures() -> None:
    session = make_session(FakeGitHub(statuses={"models.yaml": 401}))
    with pytest.raises(InvalidCredential):
        await check_connection(session, settings_for())

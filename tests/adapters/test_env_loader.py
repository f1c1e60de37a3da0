"""Environment loader adapter tests covering prefix naming and filtering."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_model_sync.adapters.env.default import DefaultEnvLoader, default_env_prefix


def test_default_env_prefix() -> None:
    """Slug values should become upper snake-case prefixes."""

    assert default_env_prefix("lib-model-sync") == "LIB_MODEL_SYNC"


def test_env_loader_keeps_namespace_only() -> None:
    environ = {
        "LIB_MODEL_SYNC_REPO_OWNER": "acme",
        "LIB_MODEL_SYNC_REPO_NAME": " models ",
        "LIB_MODEL_SYNC_TOKEN": "   ",
        "LIB_MODEL_SYNC_": "orphan",
        "OTHER_REPO_OWNER": "ignored",
    }
    payload = DefaultEnvLoader(environ=environ).load("LIB_MODEL_SYNC")
    assert payload == {"repo_owner": "acme", "repo_name": "models"}


def test_env_loader_accepts_trailing_underscore_prefix() -> None:
    payload = DefaultEnvLoader(environ={"DEMO_BRANCH": "dev"}).load("DEMO_")
    assert payload == {"branch": "dev"}


def test_env_loader_does_not_coerce_values() -> None:
    payload = DefaultEnvLoader(environ={"DEMO_BRANCH": "true", "DEMO_CONFIG_PATH": "42"}).load("DEMO")
    assert payload == {"branch": "true", "config_path": "42"}


SUFFIXES = st.sampled_from(["REPO_OWNER", "REPO_NAME", "BRANCH", "CONFIG_PATH", "TOKEN", "API_ROOT"])
VALUES = st.text(alphabet="abcdefghij-_./ ", max_size=10)


@given(st.dictionaries(SUFFIXES, VALUES, max_size=6))
def test_env_loader_handles_random_namespace(entries: dict[str, str]) -> None:
    """Non-blank values appear stripped under their lower-case suffix; blanks are skipped."""

    environ = {f"DEMO_{key}": value for key, value in entries.items()}
    environ["IGNORED"] = "1"
    payload = DefaultEnvLoader(environ=environ).load("DEMO")
    expected = {key.lower(): value.strip() for key, value in entries.items() if value.strip()}
    assert payload == expected

"""Adapter contract tests for the default ports implementation.

Verify the default adapters continue to satisfy the application-layer ports
defined in ``src/lib_model_sync/application/ports.py`` so dependency inversion
remains enforceable through automated tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from lib_model_sync.adapters.decoders.structured import JSONRecordDecoder, YAMLSubsetDecoder
from lib_model_sync.adapters.github.contents import GitHubContentsClient
from lib_model_sync.adapters.storage.default import JsonFileStore, MemoryStore
from lib_model_sync.application import ports


@pytest.mark.parametrize("factory", [MemoryStore, lambda: JsonFileStore(Path("unused-state.json"))])
def test_stores_fulfil_key_value_store(factory) -> None:
    assert isinstance(factory(), ports.KeyValueStore)


def test_github_client_fulfils_content_fetcher() -> None:
    assert isinstance(GitHubContentsClient(), ports.ContentFetcher)


@pytest.mark.parametrize("decoder", [JSONRecordDecoder(), YAMLSubsetDecoder()])
def test_decoders_fulfil_record_decoder(decoder) -> None:
    assert isinstance(decoder, ports.RecordDecoder)
    assert decoder.decode("[]" if decoder.format_name == "json" else "", path="contract") == []


def test_memory_store_contract_round_trip() -> None:
    store: ports.KeyValueStore = MemoryStore()
    store.set("key", "value")
    assert store.get("key") == "value"
    store.delete("key")
    assert store.get("key") is None

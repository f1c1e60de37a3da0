"""Shared fakes for the test-suite: an in-process GitHub and a steerable clock."""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import httpx

from lib_model_sync.adapters.storage.default import MemoryStore
from lib_model_sync.application.ports import KeyValueStore
from lib_model_sync.core import Session, open_session
from lib_model_sync.domain.model import ConnectionSettings

START = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class ManualClock:
    """Clock that only moves when a test advances it."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


def encode_content(text: str) -> str:
    """Return *text* base64-encoded and wrapped at 60 characters the way GitHub does."""

    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    return "\n".join(encoded[start : start + 60] for start in range(0, len(encoded), 60)) + "\n"


@dataclass
class FakeGitHub:
    """Serve repository files through :class:`httpx.MockTransport` and record each request.

    ``files`` maps ``owner/name:path`` (or just ``path`` for any repository) to
    text. ``statuses`` forces a status code for a path.
    """

    files: dict[str, str] = field(default_factory=dict)
    statuses: dict[str, int] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        prefix, _, path = request.url.path.partition("/contents/")
        repo = prefix.removeprefix("/repos/")
        if path in self.statuses:
            return httpx.Response(self.statuses[path], json={"message": "refused"})
        text = self.files.get(f"{repo}:{path}", self.files.get(path))
        if text is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json={"content": encode_content(text), "encoding": "base64", "path": path})


def make_session(
    github: FakeGitHub,
    *,
    clock: ManualClock | None = None,
    store: KeyValueStore | None = None,
    environ: Mapping[str, str] | None = None,
) -> Session:
    """Return a session wired to *github* with in-memory state."""

    return open_session(
        environ={} if environ is None else environ,
        transport=github.transport,
        clock=clock or ManualClock(),
        store=store if store is not None else MemoryStore(),
    )


def settings_for(owner: str = "acme", name: str = "models", **overrides: Any) -> ConnectionSettings:
    return ConnectionSettings(repo_owner=owner, repo_name=name, **overrides)


def models_json(*records: Mapping[str, Any], wrapped: bool = False) -> str:
    """Return *records* as a JSON config document (optionally under ``models``)."""

    payload: Any = {"models": list(records)} if wrapped else list(records)
    return json.dumps(payload)


SCENARIO_YAML = """\
- id: m1
  name: Foo
  metrics:
    accuracy: 0.9
- id: m2
  status: bogus
"""

"""GitHub contents API transport.

Purpose
-------
Implement the :class:`lib_model_sync.application.ports.ContentFetcher` protocol
against ``GET /repos/{owner}/{name}/contents/{path}?ref={branch}``. The adapter
owns every HTTP detail (URL template, headers, envelope decoding) and reports
unsuccessful responses as :class:`~lib_model_sync.domain.errors.TransportError`
with the status code; callers translate statuses into their own errors.

Contents
--------
* :class:`GitHubContentsClient` – async fetcher built on :mod:`httpx`.
* :func:`contents_url` / :func:`build_headers` – request construction.
* :func:`decode_envelope` – base64 ``content`` field to text.
* :func:`blob_url` / :func:`raw_url` – links for browsing or downloading a file.
"""

from __future__ import annotations

import base64
from typing import Any

import httpx

from ...domain.errors import MalformedConfig, TransportError
from ...domain.model import ConnectionSettings
from ...observability import log_debug, log_error, make_event

DEFAULT_API_ROOT = "https://api.github.com"
ACCEPT_HEADER = "application/vnd.github.v3+json"


class GitHubContentsClient:
    """Fetch repository files through the GitHub contents API.

    A fresh :class:`httpx.AsyncClient` is opened per request so the fetcher can
    be shared freely; pass *transport* to substitute the network (tests use
    :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        *,
        api_root: str = DEFAULT_API_ROOT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_root = api_root.rstrip("/")
        self._transport = transport

    async def fetch_text(self, settings: ConnectionSettings, path: str) -> str:
        """Return the decoded text of *path* at the branch configured in *settings*.

        Raises
        ------
        TransportError
            For non-success statuses (with ``status_code``) and for network
            failures (``status_code`` is ``None``).
        MalformedConfig
            When the response envelope carries no decodable ``content``.
        """

        url = contents_url(settings, path, api_root=self.api_root)
        log_debug("remote_request", **make_event("remote", path, {"repo": settings.identity, "ref": settings.branch}))
        try:
            async with httpx.AsyncClient(transport=self._transport, headers=build_headers(settings)) as client:
                response = await client.get(url, params={"ref": settings.branch})
        except httpx.HTTPError as exc:
            log_error("remote_error", **make_event("remote", path, {"error": str(exc)}))
            raise TransportError(None, f"GitHub request failed: {exc}") from exc

        if not response.is_success:
            log_error("remote_error", **make_event("remote", path, {"status": response.status_code}))
            raise TransportError(response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedConfig(f"GitHub returned an unreadable response for {path}") from exc
        return decode_envelope(payload, path=path)


def contents_url(settings: ConnectionSettings, path: str, *, api_root: str = DEFAULT_API_ROOT) -> str:
    """Return the contents endpoint for *path* (the ``ref`` goes in the query string).

    Examples
    --------
    >>> contents_url(ConnectionSettings("acme", "models"), "configs/models.yaml")
    'https://api.github.com/repos/acme/models/contents/configs/models.yaml'
    """

    return f"{api_root.rstrip('/')}/repos/{settings.repo_owner}/{settings.repo_name}/contents/{path.lstrip('/')}"


def build_headers(settings: ConnectionSettings) -> dict[str, str]:
    """Return request headers, adding a bearer token only when one is configured.

    Examples
    --------
    >>> build_headers(ConnectionSettings("acme", "models"))
    {'Accept': 'application/vnd.github.v3+json'}
    >>> build_headers(ConnectionSettings("acme", "models", token="t0k"))["Authorization"]
    'Bearer t0k'
    """

    headers = {"Accept": ACCEPT_HEADER}
    if settings.token:
        headers["Authorization"] = f"Bearer {settings.token}"
    return headers


def decode_envelope(payload: Any, *, path: str) -> str:
    """Return the UTF-8 text carried base64-encoded in ``payload["content"]``.

    GitHub wraps the encoded content at 60 characters; embedded newlines are
    ignored.

    Examples
    --------
    >>> decode_envelope({"content": "LSBpZDogbTEK\\n", "encoding": "base64"}, path="models.yaml")
    '- id: m1\\n'
    """

    content = payload.get("content") if isinstance(payload, dict) else None
    if not isinstance(content, str):
        raise MalformedConfig(f"GitHub response for {path} has no file content")
    try:
        return base64.b64decode(content).decode("utf-8")
    except ValueError as exc:
        raise MalformedConfig(f"GitHub response for {path} could not be decoded: {exc}") from exc


def blob_url(settings: ConnectionSettings, path: str) -> str:
    """Return the github.com page that displays *path*.

    Examples
    --------
    >>> blob_url(ConnectionSettings("acme", "models", branch="dev"), "cards/churn.md")
    'https://github.com/acme/models/blob/dev/cards/churn.md'
    """

    return f"https://github.com/{settings.repo_owner}/{settings.repo_name}/blob/{settings.branch}/{path.lstrip('/')}"


def raw_url(settings: ConnectionSettings, path: str) -> str:
    """Return the raw download link for *path*."""

    return (
        f"https://raw.githubusercontent.com/{settings.repo_owner}/{settings.repo_name}"
        f"/refs/heads/{settings.branch}/{path.lstrip('/')}"
    )

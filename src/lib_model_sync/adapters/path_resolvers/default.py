"""Filesystem location of the persisted sync state.

Purpose
-------
Encapsulate the OS-specific rules for where the settings and cache records are
stored. The adapter is the only component that knows filesystem conventions.

Contents
--------
* :data:`STATE_FILENAME` – name of the JSON state file.
* :class:`DefaultStatePathResolver` – resolves the state directory per platform.

System Role
-----------
:func:`lib_model_sync.core.open_session` asks the resolver for
:meth:`DefaultStatePathResolver.state_file` unless the caller passes an explicit
directory. ``LIB_MODEL_SYNC_STATE_DIR`` overrides every platform rule, which the
test-suite and portable installs rely on.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from ...observability import log_debug

STATE_FILENAME = "state.json"
STATE_DIR_ENV = "LIB_MODEL_SYNC_STATE_DIR"


class DefaultStatePathResolver:
    """Resolve the directory holding ``state.json``."""

    def __init__(
        self,
        *,
        vendor: str,
        app: str,
        slug: str,
        env: dict[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        """Store the naming context and the environment used for overrides.

        Parameters
        ----------
        vendor / app / slug:
            Naming context injected into platform-specific directory structures.
        env:
            Optional mapping layered over ``os.environ`` (useful for tests).
        platform:
            ``sys.platform`` clone; defaults to the running interpreter.
        """

        self.vendor = vendor
        self.application = app
        self.slug = slug
        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform

    def state_dir(self) -> Path:
        """Return the directory that holds the state file.

        Examples
        --------
        >>> resolver = DefaultStatePathResolver(vendor="Acme", app="Models", slug="models",
        ...                                     env={"XDG_STATE_HOME": "/tmp/xdg", "LIB_MODEL_SYNC_STATE_DIR": ""},
        ...                                     platform="linux")
        >>> resolver.state_dir().as_posix()
        '/tmp/xdg/models'
        """

        override = self.env.get(STATE_DIR_ENV)
        if override:
            directory = Path(override)
        elif self.platform.startswith("linux"):
            directory = self._linux()
        elif self.platform == "darwin":
            directory = self._macos()
        elif self.platform.startswith("win"):
            directory = self._windows()
        else:
            directory = Path.home() / f".{self.slug}"
        log_debug("state_dir_resolved", source="paths", path=str(directory), platform=self.platform)
        return directory

    def state_file(self) -> Path:
        """Return the full path of ``state.json``."""

        return self.state_dir() / STATE_FILENAME

    def _linux(self) -> Path:
        xdg = self.env.get("XDG_STATE_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "state"
        return base / self.slug

    def _macos(self) -> Path:
        return Path.home() / "Library" / "Application Support" / self.vendor / self.application

    def _windows(self) -> Path:
        local = Path(self.env.get("LOCALAPPDATA", Path.home() / "AppData" / "Local"))
        return local / self.vendor / self.application

"""Environment variable adapter.

Purpose
-------
Let operators supply or override connection settings without persisting them,
which is the usual way to hand a token to CI jobs.

Key behaviours
--------------
* Enforces a prefix (``default_env_prefix``) so only relevant keys are captured.
* Returns lower-case keys with the prefix removed (``LIB_MODEL_SYNC_TOKEN`` →
  ``token``); values stay strings because owners, repositories and tokens may
  legitimately look like numbers.
* Empty values are ignored so ``export LIB_MODEL_SYNC_TOKEN=`` does not wipe a
  stored credential.
"""

from __future__ import annotations

import os
from typing import Mapping

from ...observability import log_debug


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-model-sync')
    'LIB_MODEL_SYNC'
    """

    return slug.replace("-", "_").upper()


class DefaultEnvLoader:
    """Load environment variables that belong to the library namespace."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability."""

        self._environ = os.environ if environ is None else environ

    def load(self, prefix: str) -> dict[str, str]:
        """Return the variables carrying *prefix*, keyed by their lower-case suffix.

        Examples
        --------
        >>> env = {'DEMO_REPO_OWNER': 'acme', 'DEMO_TOKEN': '', 'OTHER': 'x'}
        >>> DefaultEnvLoader(environ=env).load('DEMO')
        {'repo_owner': 'acme'}
        """

        prefix = f"{prefix}_" if prefix and not prefix.endswith("_") else prefix
        collected: dict[str, str] = {}
        for key, value in self._environ.items():
            if not key.startswith(prefix):
                continue
            stripped = key[len(prefix) :].lower()
            if not stripped or not value.strip():
                continue
            collected[stripped] = value.strip()
        log_debug("env_variables_loaded", source="env", path=None, keys=sorted(collected))
        return collected

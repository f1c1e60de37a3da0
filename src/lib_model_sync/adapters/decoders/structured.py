"""Config decoders that turn fetched text into a list of raw model records.

Purpose
-------
Convert the text of a remote model file into the list the normalizer consumes.
The decoder is chosen from the file extension so repositories may keep either
format; error handling and observability live here rather than in the client.

Contents
--------
* :class:`BaseRecordDecoder` – shared helper extracting the record list.
* :class:`JSONRecordDecoder` – strict JSON documents.
* :class:`YAMLSubsetDecoder` – wrapper around
  :func:`lib_model_sync.adapters.decoders.yaml_subset.decode_yaml_subset`.
* :func:`decoder_for` – pick the decoder for a path.
* :func:`decode_records` – decode *text* fetched from *path* in one call.

System Role
-----------
Invoked by :class:`lib_model_sync.application.sync.RemoteConfigClient` after the
transport envelope has been unpacked, and by the CLI ``decode`` command for
local files.
"""

from __future__ import annotations

import json
from pathlib import PurePosixPath
from typing import Mapping

from ...domain.errors import MalformedConfig
from ...observability import log_debug, log_error
from .yaml_subset import decode_yaml_subset

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class BaseRecordDecoder:
    """Common utilities shared by the record decoders."""

    format_name = "unknown"

    def decode(self, text: str, *, path: str) -> list[object]:
        """Return the raw records contained in *text* or raise ``MalformedConfig``."""

        raise NotImplementedError

    def _ensure_record_list(self, data: object, *, path: str) -> list[object]:
        """Return the record list from a bare list or a ``{"models": [...]}`` object.

        Examples
        --------
        >>> BaseRecordDecoder()._ensure_record_list({"models": [{"id": "a"}]}, path="demo.json")
        [{'id': 'a'}]
        >>> BaseRecordDecoder()._ensure_record_list({"items": []}, path="demo.json")
        Traceback (most recent call last):
        ...
        lib_model_sync.domain.errors.MalformedConfig: Config file must contain an array of models
        """

        records = data.get("models") if isinstance(data, Mapping) else data
        if not isinstance(records, list):
            log_error("config_not_a_list", source="decoder", path=path, format=self.format_name)
            raise MalformedConfig()
        log_debug("config_decoded", source="decoder", path=path, format=self.format_name, records=len(records))
        return records


class JSONRecordDecoder(BaseRecordDecoder):
    """Decode strict JSON documents."""

    format_name = "json"

    def decode(self, text: str, *, path: str) -> list[object]:
        """Return the records of the JSON document *text*.

        Examples
        --------
        >>> JSONRecordDecoder().decode('[{"id": "a"}]', path="models.json")
        [{'id': 'a'}]
        """

        try:
            data = json.loads(text)
        except (ValueError, RecursionError) as exc:
            log_error("config_invalid", source="decoder", path=path, format=self.format_name, error=str(exc))
            raise MalformedConfig(f"Invalid JSON in {path}: {exc}") from exc
        return self._ensure_record_list(data, path=path)


class YAMLSubsetDecoder(BaseRecordDecoder):
    """Decode the indentation-based record list format."""

    format_name = "yaml"

    def decode(self, text: str, *, path: str) -> list[object]:
        """Return the records read by the line scanner (never fails on content)."""

        return self._ensure_record_list(decode_yaml_subset(text), path=path)


_JSON = JSONRecordDecoder()
_YAML = YAMLSubsetDecoder()


def decoder_for(path: str) -> BaseRecordDecoder:
    """Return the decoder matching the extension of *path*.

    ``.yaml``/``.yml`` select the line scanner; every other extension is read as
    JSON.

    Examples
    --------
    >>> decoder_for("config/models.YML").format_name
    'yaml'
    >>> decoder_for("models.json").format_name, decoder_for("models").format_name
    ('json', 'json')
    """

    if PurePosixPath(path).suffix.lower() in _YAML_SUFFIXES:
        return _YAML
    return _JSON


def decode_records(text: str, path: str) -> list[object]:
    """Decode *text* read from *path* with the decoder its extension selects."""

    return decoder_for(path).decode(text, path=path)

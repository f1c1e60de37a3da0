"""Decoder for the indentation-based (YAML-like) model list format.

Purpose
-------
Parse the small subset of YAML that model registries keep in their repository:
a flat list of records, each a set of ``key: value`` lines, with at most one
level of nesting for the ``metrics`` and ``files`` sections::

    - id: churn-v2
      name: Churn
      metrics:
        accuracy: 0.91
      files:
        modelCard: cards/churn.md

Contents
--------
* :func:`decode_yaml_subset` – scan text into an ordered list of records.
* :class:`_RecordBuilder` – accumulates the record and nested section being read.

Limits
------
This is deliberately not a YAML parser. There are no flow collections, block
scalars, anchors, or multiple documents, and nested sections are only
recognised for lines indented by at least four spaces. Deeper nesting is
flattened into the enclosing record and two-space nested indentation is read
as top-level keys.
"""

from __future__ import annotations

from ...domain.model import Record, Scalar
from .values import coerce_scalar

NESTED_SECTIONS = frozenset({"metrics", "files"})
"""Keys that open a nested mapping when they carry no inline value."""

_NESTED_INDENT = "    "


def decode_yaml_subset(text: str) -> list[Record]:
    """Return the records described by *text* in document order.

    Blank lines and ``#`` comments are skipped. Lines that appear before the
    first ``-`` marker (such as a ``models:`` wrapper) are ignored, as are lines
    without a colon.

    Examples
    --------
    >>> body = "\\n".join([
    ...     "- id: m1",
    ...     "  name: Foo",
    ...     "  metrics:",
    ...     "    accuracy: 0.9",
    ...     "- id: m2",
    ...     "  status: bogus",
    ... ])
    >>> decode_yaml_subset(body)
    [{'id': 'm1', 'name': 'Foo', 'metrics': {'accuracy': 0.9}}, {'id': 'm2', 'status': 'bogus'}]
    >>> decode_yaml_subset("-\\n- name: only")
    [{}, {'name': 'only'}]
    """

    builder = _RecordBuilder()
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line == "-" or line.startswith("- "):
            builder.start_record(line[1:].strip())
            continue
        if builder.active and ":" in line:
            key, value = _split_pair(line)
            builder.assign(key, value, indented=raw_line.startswith(_NESTED_INDENT))
    return builder.finish()


class _RecordBuilder:
    """Track the record under construction and its open nested section."""

    def __init__(self) -> None:
        self.records: list[Record] = []
        self._current: Record | None = None
        self._nested: dict[str, Scalar] | None = None
        self._nested_key: str | None = None

    @property
    def active(self) -> bool:
        """Return ``True`` once the first ``-`` marker has been read."""

        return self._current is not None

    def start_record(self, inline: str) -> None:
        """Close the current record and open a new one seeded with *inline*."""

        self._close_record()
        self._current = {}
        if ":" in inline:
            key, value = _split_pair(inline)
            if key:
                self._current[key] = coerce_scalar(value)

    def assign(self, key: str, value: str, *, indented: bool) -> None:
        """Store ``key: value`` on the nested section or the record itself."""

        if not key or self._current is None:
            return
        if key in NESTED_SECTIONS and not value:
            self._close_nested()
            self._nested_key = key
            self._nested = {}
            return
        if self._nested is not None and indented:
            self._nested[key] = coerce_scalar(value)
            return
        self._close_nested()
        self._current[key] = coerce_scalar(value)

    def finish(self) -> list[Record]:
        """Flush pending state and return every record read."""

        self._close_record()
        return self.records

    def _close_nested(self) -> None:
        # empty sections are dropped so ``metrics:`` alone does not create a group
        if self._current is not None and self._nested_key and self._nested:
            self._current[self._nested_key] = self._nested
        self._nested = None
        self._nested_key = None

    def _close_record(self) -> None:
        self._close_nested()
        if self._current is not None:
            self.records.append(self._current)
        self._current = None


def _split_pair(line: str) -> tuple[str, str]:
    """Split *line* at its first colon into stripped key and value.

    Examples
    --------
    >>> _split_pair('description: "a: b"')
    ('description', '"a: b"')
    """

    key, _, value = line.partition(":")
    return key.strip(), value.strip()

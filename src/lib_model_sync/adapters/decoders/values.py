"""Scalar coercion for the indentation-based config format.

Purpose
-------
Turn the untyped text on the right-hand side of ``key: value`` into a Python
primitive. Kept separate from the line scanner so the rules can be tested on
their own.
"""

from __future__ import annotations

import math
import re

from ...domain.model import Scalar

_NUMBER = re.compile(r"^-?\d+(\.\d+)?$", re.ASCII)
_QUOTES = {'"', "'"}


def coerce_scalar(raw: str) -> Scalar:
    """Coerce the textual *raw* value into a string, number, boolean, or ``None``.

    Rules are applied in order: empty text becomes ``""``; a value wrapped in
    matching single or double quotes loses its quotes and is never coerced
    further; integers and decimals become ``int``/``float``; ``true``/``false``
    become booleans; ``null`` and ``~`` become ``None``. Anything else is kept
    verbatim, as is a number too long to convert.

    Examples
    --------
    >>> coerce_scalar(''), coerce_scalar('"1.0"'), coerce_scalar("'x'")
    ('', '1.0', 'x')
    >>> coerce_scalar('42'), coerce_scalar('-0.25'), coerce_scalar('1e3')
    (42, -0.25, '1e3')
    >>> coerce_scalar('true'), coerce_scalar('False'), coerce_scalar('~')
    (True, 'False', None)
    """

    if not raw:
        return ""
    if len(raw) >= 2 and raw[0] == raw[-1] and raw[0] in _QUOTES:
        return raw[1:-1]
    match = _NUMBER.match(raw)
    if match:
        if match.group(1):
            number = float(raw)
            # too many digits for a finite float
            return number if math.isfinite(number) else raw
        try:
            return int(raw)
        except ValueError:
            # past the interpreter's int conversion limit
            return raw
    if raw == "true":
        return True
    if raw == "false":
        return False
    if raw in {"null", "~"}:
        return None
    return raw

"""
assignment_parser.py - build an Environment from a free-form "name=value" list.

Format:
  x=1; y = 2
  z=99
  w=          (explicit empty value -> w is absent)

Pieces are split on ';' or newline, empty pieces are skipped,
whitespace inside a piece is ignored. Later assignments override earlier ones.

An empty value binds the name as absent, so IS-MISSING(w) is true and a
comparison on w raises UndefinedVariableError. It is never coerced to 0.
"""
from __future__ import annotations

import re
from typing import Optional

from contracts import AssignmentError, Environment, Number

_SEPARATOR_RE = re.compile(r"[;\n]")
_NAME_RE = re.compile(r"^[a-zA-Z]+[_a-zA-Z0-9]*$")
_VALUE_RE = re.compile(r"^[+-]?\d+(?:\.\d+)?$")


def _parse_value(raw: str, piece: str) -> Optional[Number]:
    if raw == "":
        return None
    if not _VALUE_RE.match(raw):
        raise AssignmentError(piece, f"wartość {raw!r} nie jest liczbą")
    if "." in raw:
        return float(raw)
    return int(raw)


def parse_assignments(text: str) -> Environment:
    """Return an Environment for the assignments in `text`."""
    values: dict[str, Optional[Number]] = {}
    for piece in _SEPARATOR_RE.split(text or ""):
        compact = re.sub(r"\s+", "", piece)
        if not compact:
            continue
        name, sep, raw = compact.partition("=")
        if not sep:
            raise AssignmentError(piece.strip(), "brak znaku '='")
        if not _NAME_RE.match(name):
            raise AssignmentError(piece.strip(), f"niepoprawna nazwa zmiennej {name!r}")
        values[name] = _parse_value(raw, piece.strip())
    return Environment(values=values)

"""Dynamic kinds of loosely-typed wire values.

Values produced by JSON/TOML/YAML parsers fall into a closed set of
kinds. The kind label is what decode error messages print as the
"got" side, so the table must stay exhaustive and exact.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class ValueKind(StrEnum):
    """Closed set of wire value kinds, valued by their error label."""

    INVALID = "invalid"  # None / JSON null
    BOOL = "bool"
    INT = "int"
    FLOAT64 = "float64"
    STRING = "string"
    SLICE = "slice"
    MAP = "map"


class UnsupportedKindError(ValueError):
    """Value lies outside the closed set of wire kinds."""


def kind_of(value: Any) -> ValueKind:
    """Classify *value* into its wire kind.

    ``bool`` is checked before ``int`` since it is an int subclass.
    """
    if value is None:
        return ValueKind.INVALID
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT64
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SLICE
    if isinstance(value, Mapping):
        return ValueKind.MAP
    msg = f"unsupported value of type '{type(value).__name__}'"
    raise UnsupportedKindError(msg)

"""Decode hook for nullable fields.

The mapping layer calls the hook once per field with the field's declared
type and the raw source value. Declared types in the dispatch table are
converted here; every other type passes through untouched so the mapping
layer's default conversion applies.

Dispatch table (declared type -> accepted source kind, expected label):

  list[str]     slice of strings        'slice' / 'string' per element
  NullString    string                  'string'
  NullBool      bool                    'bool'
  NullInt       int                     'int'
  NullFloat     float64                 'float32 or float64'
  NullDuration  string (text grammar)   'string'

A ``None`` source for a nullable type yields the absent value.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, get_args, get_origin

from nullconf.decoding.errors import KindMismatchError
from nullconf.domain.kinds import ValueKind, kind_of
from nullconf.domain.null import (
    NullBool,
    NullDuration,
    NullFloat,
    NullInt,
    NullString,
    NullValue,
)

DecodeHook = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class Conversion:
    """One row of the dispatch table."""

    accepts: ValueKind
    expected: str
    convert: Callable[[Any], NullValue]


CONVERSIONS: dict[type[NullValue], Conversion] = {
    NullString: Conversion(ValueKind.STRING, "string", NullString.from_value),
    NullBool: Conversion(ValueKind.BOOL, "bool", NullBool.from_value),
    NullInt: Conversion(ValueKind.INT, "int", NullInt.from_value),
    NullFloat: Conversion(ValueKind.FLOAT64, "float32 or float64", NullFloat.from_value),
    NullDuration: Conversion(ValueKind.STRING, "string", NullDuration.from_text),
}


def is_string_list(declared: Any) -> bool:
    """True for ``list[str]`` declarations."""
    return get_origin(declared) is list and get_args(declared) == (str,)


def _decode_string_list(value: Any) -> list[str]:
    kind = kind_of(value)
    if kind is not ValueKind.SLICE:
        raise KindMismatchError("slice", kind)
    for index, item in enumerate(value):
        item_kind = kind_of(item)
        if item_kind is not ValueKind.STRING:
            raise KindMismatchError("string", item_kind, index=index)
    return list(value)


def null_decoder(declared: Any, value: Any) -> Any:
    """Convert *value* for a field declared as *declared*.

    Raises:
        KindMismatchError: The value's kind is not the one the field expects.
        DurationParseError: A duration field got malformed text.
    """
    if is_string_list(declared):
        return _decode_string_list(value)

    conversion = CONVERSIONS.get(declared)
    if conversion is None:
        return value
    if isinstance(value, declared):
        return value

    kind = kind_of(value)
    if kind is ValueKind.INVALID:
        return declared()
    if kind is not conversion.accepts:
        raise KindMismatchError(conversion.expected, kind)
    return conversion.convert(value)

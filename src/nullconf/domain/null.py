"""Nullable value models: a value paired with an explicit presence flag.

A nullable value is ``(value, valid)``. When ``valid`` is False the value
is absent, whatever its stored bits say; a zero duration and a missing
duration are never confused.

Wire behaviour shared by every nullable model:
- JSON ``null`` validates to the absent value.
- Any other raw value validates to a present value.
- A mapping with exactly ``value`` and ``valid`` keys is taken
  field-by-field; any other mapping is a raw value and fails validation.
- Serialization emits ``null`` when absent, else the bare value.

All models are frozen; decoding always builds a new instance.
"""

from __future__ import annotations

import re
from typing import Annotated, Any, ClassVar, Self

from pydantic import (
    BaseModel,
    Field,
    SerializerFunctionWrapHandler,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_serializer,
    model_validator,
)

from nullconf.domain.duration import Duration, parse_duration

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_INT_TEXT_RE = re.compile(r"[+-]?[0-9]+")


def _is_field_form(data: Any) -> bool:
    """A ``{"value": ..., "valid": ...}`` mapping, or an explicit absent ``{"valid": false}``."""
    if not isinstance(data, dict):
        return False
    return data.keys() == {"value", "valid"} or data == {"valid": False}


class NullValue(BaseModel):
    """Base for nullable scalars. Subclasses declare a ``value`` field."""

    model_config = {"frozen": True}

    valid: bool = False

    # Text forms that decode to the absent value.
    absent_texts: ClassVar[frozenset[str]] = frozenset({"", "null"})

    def __init__(self, **data: Any) -> None:
        data.setdefault("valid", False)
        super().__init__(**data)

    @model_validator(mode="before")
    @classmethod
    def wrap_raw_value(cls, data: Any) -> Any:
        if isinstance(data, cls) or _is_field_form(data):
            return data
        if data is None:
            return {"valid": False}
        return {"value": data, "valid": True}

    @model_serializer(mode="wrap")
    def serialize_value(self, handler: SerializerFunctionWrapHandler) -> Any:
        if not self.valid:
            return None
        return handler(self)["value"]

    @classmethod
    def from_value(cls, value: Any) -> Self:
        """Build a present (valid) value."""
        return cls(value=value, valid=True)

    @classmethod
    def from_text(cls, text: str | bytes) -> Self:
        """Decode from text, e.g. an environment variable or CLI flag."""
        if isinstance(text, bytes):
            text = text.decode("utf-8")
        if text in cls.absent_texts:
            return cls()
        return cls.from_value(cls._parse_text(text))

    @classmethod
    def _parse_text(cls, text: str) -> Any:
        return text

    def value_or_none(self) -> Any:
        """The value if present, otherwise None."""
        return getattr(self, "value") if self.valid else None


class NullString(NullValue):
    """Nullable string. Any non-empty text is present."""

    value: StrictStr = ""

    absent_texts: ClassVar[frozenset[str]] = frozenset({""})


class NullBool(NullValue):
    """Nullable bool."""

    value: StrictBool = False

    @classmethod
    def _parse_text(cls, text: str) -> bool:
        if text == "true":
            return True
        if text == "false":
            return False
        msg = f"invalid input: {text}"
        raise ValueError(msg)


class NullInt(NullValue):
    """Nullable 64-bit integer."""

    value: Annotated[StrictInt, Field(ge=_INT64_MIN, le=_INT64_MAX)] = 0

    @classmethod
    def _parse_text(cls, text: str) -> int:
        if not _INT_TEXT_RE.fullmatch(text):
            msg = f"invalid syntax: {text!r}"
            raise ValueError(msg)
        # bound the digit count before int() conversion
        if len(text.lstrip("+-").lstrip("0")) > len(str(_INT64_MAX)):
            msg = f"value out of range: {text!r}"
            raise ValueError(msg)
        value = int(text)
        if not _INT64_MIN <= value <= _INT64_MAX:
            msg = f"value out of range: {text!r}"
            raise ValueError(msg)
        return value


class NullFloat(NullValue):
    """Nullable float."""

    value: StrictFloat = 0.0

    @classmethod
    def _parse_text(cls, text: str) -> float:
        if text != text.strip() or "_" in text:
            msg = f"invalid syntax: {text!r}"
            raise ValueError(msg)
        return float(text)


class NullDuration(NullValue):
    """Nullable :class:`Duration`.

    Unlike the scalar models, only the empty text is absent; ``"null"``
    is a malformed duration.
    """

    value: Duration = Duration(0)

    absent_texts: ClassVar[frozenset[str]] = frozenset({""})

    @classmethod
    def _parse_text(cls, text: str) -> Duration:
        return parse_duration(text)

    @classmethod
    def from_json(cls, raw: str | bytes) -> NullDuration:
        """Decode JSON ``null``, a number (nanoseconds), or a duration string."""
        if raw.strip() in ("null", b"null"):
            return cls()
        return cls(value=Duration.from_json(raw), valid=True)

    def to_json(self) -> str:
        """Encode as JSON ``null`` or the duration string."""
        return self.model_dump_json()


def new_null_duration(duration: int, valid: bool) -> NullDuration:
    """Build a NullDuration from its two fields."""
    return NullDuration(value=Duration(duration), valid=valid)


def null_duration_from(duration: int) -> NullDuration:
    """Build a present NullDuration."""
    return NullDuration(value=Duration(duration), valid=True)

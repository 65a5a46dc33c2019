"""Duration: a signed nanosecond time span with a compact text form.

Text grammar (same as the Go ``time.ParseDuration`` family):
  [-+]?([0-9]*(\\.[0-9]*)?unit)+   with unit in ns, us, µs, ms, s, m, h

Wire contract is accept-wide, emit-narrow:
- JSON input: an integer (nanoseconds) or a string in the text grammar.
- JSON output: always the string form, never a bare number.

INVARIANT: a Duration always fits a signed 64-bit nanosecond count.
"""

from __future__ import annotations

import json
import re
from datetime import timedelta
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

NANOSECOND = 1
MICROSECOND = 1_000 * NANOSECOND
MILLISECOND = 1_000 * MICROSECOND
SECOND = 1_000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE

_MIN_NANOS = -(1 << 63)
_MAX_NANOS = (1 << 63) - 1
_MAX_DIGITS = len(str(1 << 63))

UNITS: dict[str, int] = {
    "ns": NANOSECOND,
    "us": MICROSECOND,
    "µs": MICROSECOND,  # U+00B5 micro sign
    "μs": MICROSECOND,  # U+03BC greek small letter mu
    "ms": MILLISECOND,
    "s": SECOND,
    "m": MINUTE,
    "h": HOUR,
}

# number, optional fraction, unit
_TOKEN_RE = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")


class DurationParseError(ValueError):
    """Text does not match the duration grammar."""


class DurationJSONError(ValueError):
    """JSON value is neither a number nor a string."""


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_fraction(value: int, precision: int) -> str:
    """Render ``value / 10**precision`` with trailing zeros trimmed."""
    whole, frac = divmod(value, 10**precision)
    digits = f"{frac:0{precision}d}".rstrip("0") if precision else ""
    return f"{whole}.{digits}" if digits else str(whole)


class Duration(int):
    """Signed time span in nanoseconds.

    Behaves as an ``int`` for comparison and hashing; ``str()`` gives the
    compact text form (``Duration(75 * SECOND)`` renders ``"1m15s"``).
    """

    __slots__ = ()

    def __new__(cls, nanos: int = 0) -> Duration:
        value = int(nanos)
        if not _MIN_NANOS <= value <= _MAX_NANOS:
            msg = f"duration out of range: {value}ns"
            raise OverflowError(msg)
        return super().__new__(cls, value)

    # --- Rendering ---

    def __str__(self) -> str:
        u = abs(int(self))
        if u == 0:
            return "0s"

        if u < SECOND:
            if u < MICROSECOND:
                text = f"{u}ns"
            elif u < MILLISECOND:
                text = f"{_format_fraction(u, 3)}µs"
            else:
                text = f"{_format_fraction(u, 6)}ms"
        else:
            secs, frac = divmod(u, SECOND)
            digits = f"{frac:09d}".rstrip("0")
            text = f"{secs % 60}.{digits}s" if digits else f"{secs % 60}s"
            minutes = secs // 60
            if minutes:
                text = f"{minutes % 60}m{text}"
                hours = minutes // 60
                if hours:
                    text = f"{hours}h{text}"

        return f"-{text}" if self < 0 else text

    def __repr__(self) -> str:
        return f"Duration({int(self)})"

    # --- Arithmetic keeps the Duration type ---

    def __add__(self, other: object) -> Duration:
        if not isinstance(other, int):
            return NotImplemented
        return Duration(int(self) + int(other))

    __radd__ = __add__

    def __sub__(self, other: object) -> Duration:
        if not isinstance(other, int):
            return NotImplemented
        return Duration(int(self) - int(other))

    def __mul__(self, other: object) -> Duration:
        if not isinstance(other, int) or isinstance(other, bool):
            return NotImplemented
        return Duration(int(self) * int(other))

    __rmul__ = __mul__

    def __neg__(self) -> Duration:
        return Duration(-int(self))

    def __abs__(self) -> Duration:
        return Duration(abs(int(self)))

    # --- Conversions ---

    def total_seconds(self) -> float:
        """Duration as floating-point seconds."""
        return int(self) / SECOND

    def to_timedelta(self) -> timedelta:
        """Convert to a timedelta, truncated toward zero to microseconds."""
        micros = abs(int(self)) // MICROSECOND
        return timedelta(microseconds=-micros if self < 0 else micros)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Duration:
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls(micros * MICROSECOND)

    @classmethod
    def from_text(cls, text: str | bytes) -> Duration:
        """Parse the text grammar. Empty text is the zero duration."""
        if isinstance(text, bytes):
            try:
                text = text.decode("utf-8")
            except UnicodeDecodeError as exc:
                msg = f"time: invalid duration {_quote(text.decode('utf-8', 'replace'))}"
                raise DurationParseError(msg) from exc
        if text == "":
            return cls(0)
        return parse_duration(text)

    @classmethod
    def from_json(cls, raw: str | bytes) -> Duration:
        """Decode a JSON number (nanoseconds) or JSON string (text grammar)."""
        try:
            data = json.loads(raw)
        except ValueError as exc:
            msg = f"invalid JSON for duration: {exc}"
            raise DurationJSONError(msg) from exc

        if isinstance(data, str):
            return parse_duration(data)
        if isinstance(data, int) and not isinstance(data, bool):
            try:
                return cls(data)
            except OverflowError as exc:
                msg = f"json: cannot unmarshal number {data} into duration"
                raise DurationJSONError(msg) from exc
        msg = f"json: cannot unmarshal {_json_label(data)} into duration"
        raise DurationJSONError(msg)

    def to_json(self) -> str:
        """Encode as a JSON string, never a bare number."""
        return json.dumps(str(self), ensure_ascii=False)

    @classmethod
    def coerce(cls, value: Any) -> Duration:
        """Accept a Duration, int nanoseconds, timedelta, or duration string."""
        if isinstance(value, Duration):
            return value
        if isinstance(value, bool):
            msg = "a duration cannot be a bool"
            raise DurationJSONError(msg)
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, timedelta):
            return cls.from_timedelta(value)
        if isinstance(value, str):
            return parse_duration(value)
        msg = f"cannot use {type(value).__name__} as a duration"
        raise DurationJSONError(msg)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls.coerce,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )


def _json_label(data: Any) -> str:
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "bool"
    if isinstance(data, (int, float)):
        return f"number {data}"
    if isinstance(data, list):
        return "array"
    return "object"


def _leading_int(digits: str, orig: str) -> int:
    """Integer value of a digit run, rejecting runs too long for 64 bits."""
    significant = digits.lstrip("0")
    if len(significant) > _MAX_DIGITS:
        raise DurationParseError(f"time: invalid duration {_quote(orig)}")
    return int(significant or "0")


def parse_duration(text: str) -> Duration:
    """Parse a duration string such as ``"300ms"``, ``"-1.5h"`` or ``"2h45m"``.

    Fractions are exact to the nanosecond; digits past the nineteenth are
    dropped. Raises :class:`DurationParseError` with the same wording as
    the Go parser.
    """
    orig = text
    s = text
    neg = False
    if s and s[0] in "-+":
        neg = s[0] == "-"
        s = s[1:]
    if s == "0":
        return Duration(0)
    if not s:
        raise DurationParseError(f"time: invalid duration {_quote(orig)}")

    limit = 1 << 63
    total = 0
    while s:
        if not (s[0] == "." or "0" <= s[0] <= "9"):
            raise DurationParseError(f"time: invalid duration {_quote(orig)}")

        token = _TOKEN_RE.match(s)
        if token is None:
            raise DurationParseError(f"time: invalid duration {_quote(orig)}")
        whole, frac, unit_name = token.group(1), token.group(2) or "", token.group(3)
        if not whole and not frac:
            raise DurationParseError(f"time: invalid duration {_quote(orig)}")
        if not unit_name:
            raise DurationParseError(f"time: missing unit in duration {_quote(orig)}")
        s = s[token.end() :]

        unit = UNITS.get(unit_name)
        if unit is None:
            raise DurationParseError(
                f"time: unknown unit {_quote(unit_name)} in duration {_quote(orig)}"
            )

        value = _leading_int(whole, orig)
        if value > limit // unit:
            raise DurationParseError(f"time: invalid duration {_quote(orig)}")
        value *= unit
        frac = frac[:_MAX_DIGITS]
        if frac:
            value += int(frac) * unit // 10 ** len(frac)
        total += value
        if total > limit:
            raise DurationParseError(f"time: invalid duration {_quote(orig)}")

    if neg:
        return Duration(-total)
    if total > _MAX_NANOS:
        raise DurationParseError(f"time: invalid duration {_quote(orig)}")
    return Duration(total)

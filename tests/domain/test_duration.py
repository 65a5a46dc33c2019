"""Tests for Duration rendering, parsing, JSON/text decoding, and pydantic use."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from pydantic import BaseModel, ValidationError

from nullconf.domain.duration import (
    HOUR,
    MICROSECOND,
    MILLISECOND,
    MINUTE,
    SECOND,
    Duration,
    DurationJSONError,
    DurationParseError,
    parse_duration,
)

MAX_NANOS = (1 << 63) - 1
MIN_NANOS = -(1 << 63)


class TestString:
    def test_minutes_and_seconds(self) -> None:
        assert str(Duration(75 * SECOND)) == "1m15s"

    @pytest.mark.parametrize(
        "nanos,expected",
        [
            (0, "0s"),
            (1, "1ns"),
            (999, "999ns"),
            (1_500, "1.5µs"),
            (1_500 * MICROSECOND, "1.5ms"),
            (10 * SECOND, "10s"),
            (SECOND + 1, "1.000000001s"),
            (HOUR, "1h0m0s"),
            (2 * HOUR + 45 * MINUTE, "2h45m0s"),
            (-90 * SECOND, "-1m30s"),
            (-1, "-1ns"),
            (MAX_NANOS, "2562047h47m16.854775807s"),
            (MIN_NANOS, "-2562047h47m16.854775808s"),
        ],
    )
    def test_rendering(self, nanos: int, expected: str) -> None:
        assert str(Duration(nanos)) == expected

    def test_fstring_uses_text_form(self) -> None:
        assert f"{Duration(75 * SECOND)}" == "1m15s"

    def test_repr(self) -> None:
        assert repr(Duration(5)) == "Duration(5)"


class TestParse:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("0", 0),
            ("-0", 0),
            ("+5s", 5 * SECOND),
            ("10s", 10 * SECOND),
            ("1m15s", 75 * SECOND),
            ("75s", 75 * SECOND),
            ("1h2m3s", HOUR + 2 * MINUTE + 3 * SECOND),
            ("1.5s", 1_500 * MILLISECOND),
            (".5s", 500 * MILLISECOND),
            ("5.s", 5 * SECOND),
            ("-1.5h", -90 * MINUTE),
            ("100ns", 100),
            ("1us", MICROSECOND),
            ("1µs", MICROSECOND),
            ("1μs", MICROSECOND),
            ("3ms", 3 * MILLISECOND),
            ("1.000000001s", SECOND + 1),
            ("2562047h47m16.854775807s", MAX_NANOS),
            ("-2562047h47m16.854775808s", MIN_NANOS),
        ],
    )
    def test_valid(self, text: str, expected: int) -> None:
        result = parse_duration(text)
        assert isinstance(result, Duration)
        assert result == expected

    @pytest.mark.parametrize(
        "text,message",
        [
            ("", 'time: invalid duration ""'),
            ("-", 'time: invalid duration "-"'),
            ("s", 'time: invalid duration "s"'),
            (".", 'time: invalid duration "."'),
            ("1h-2m", 'time: unknown unit "h-" in duration "1h-2m"'),
            ("10", 'time: missing unit in duration "10"'),
            ("1.5.5s", 'time: missing unit in duration "1.5.5s"'),
            ("10x", 'time: unknown unit "x" in duration "10x"'),
            ("3d", 'time: unknown unit "d" in duration "3d"'),
            ("3000000h", 'time: invalid duration "3000000h"'),
            ("2562047h47m16.854775808s", 'time: invalid duration "2562047h47m16.854775808s"'),
        ],
    )
    def test_invalid(self, text: str, message: str) -> None:
        with pytest.raises(DurationParseError) as exc_info:
            parse_duration(text)
        assert str(exc_info.value) == message

    def test_overlong_whole_number(self) -> None:
        text = "1" * 5000 + "s"
        with pytest.raises(DurationParseError) as exc_info:
            parse_duration(text)
        assert str(exc_info.value) == f'time: invalid duration "{text}"'

    def test_leading_zeros_do_not_count(self) -> None:
        assert parse_duration("0" * 5000 + "1s") == SECOND

    def test_overlong_fraction_is_truncated(self) -> None:
        assert parse_duration("1." + "0" * 5000 + "s") == SECOND
        assert parse_duration("0." + "9" * 30 + "s") == SECOND - 1

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_duration("nope")

    @pytest.mark.parametrize(
        "nanos",
        [0, 1, 999, 1_000, 1_234_567, SECOND, 75 * SECOND, 26 * HOUR + 1, MAX_NANOS, -MINUTE],
    )
    def test_round_trip(self, nanos: int) -> None:
        assert parse_duration(str(Duration(nanos))) == Duration(nanos)


class TestJSON:
    @pytest.mark.parametrize("raw", ["75000000000", '"75s"', '"1m15s"', b'"1m15s"'])
    def test_unmarshal(self, raw: str | bytes) -> None:
        assert Duration.from_json(raw) == Duration(75 * SECOND)

    def test_marshal_is_string(self) -> None:
        assert Duration(75 * SECOND).to_json() == '"1m15s"'

    def test_marshal_keeps_micro_sign(self) -> None:
        assert Duration(1_500).to_json() == '"1.5µs"'

    def test_marshal_round_trip(self) -> None:
        d = Duration(HOUR + 500 * MILLISECOND)
        assert Duration.from_json(d.to_json()) == d

    @pytest.mark.parametrize("raw", ["true", "null", "{}", "[]", "7.5e10", "75.5"])
    def test_wrong_shape(self, raw: str) -> None:
        with pytest.raises(DurationJSONError, match="cannot unmarshal"):
            Duration.from_json(raw)

    def test_malformed_json(self) -> None:
        with pytest.raises(DurationJSONError, match="invalid JSON"):
            Duration.from_json("{not json")

    def test_out_of_range_number(self) -> None:
        with pytest.raises(DurationJSONError):
            Duration.from_json(str(1 << 64))

    def test_overlong_number(self) -> None:
        with pytest.raises(DurationJSONError):
            Duration.from_json("1" * 5000)

    def test_invalid_utf8(self) -> None:
        with pytest.raises(DurationJSONError, match="invalid JSON"):
            Duration.from_json(b'"\xff"')

    def test_bad_string_propagates_parse_error(self) -> None:
        with pytest.raises(DurationParseError, match='time: invalid duration "abc"'):
            Duration.from_json('"abc"')


class TestText:
    def test_unmarshal(self) -> None:
        assert Duration.from_text("10s") == Duration(10 * SECOND)

    def test_bytes(self) -> None:
        assert Duration.from_text(b"1m") == Duration(MINUTE)

    def test_empty_is_zero(self) -> None:
        assert Duration.from_text("") == Duration(0)

    def test_malformed(self) -> None:
        with pytest.raises(DurationParseError):
            Duration.from_text("10")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(DurationParseError, match="time: invalid duration"):
            Duration.from_text(b"\xff1s")


class TestValue:
    def test_is_int(self) -> None:
        assert Duration(SECOND) == SECOND
        assert Duration(SECOND) < Duration(MINUTE)

    def test_arithmetic_keeps_type(self) -> None:
        total = Duration(SECOND) + Duration(SECOND)
        assert isinstance(total, Duration)
        assert str(total) == "2s"
        assert str(Duration(MINUTE) - SECOND) == "59s"
        assert str(-Duration(SECOND)) == "-1s"
        assert str(abs(Duration(-SECOND))) == "1s"
        assert str(Duration(SECOND) * 3) == "3s"
        assert str(3 * Duration(SECOND)) == "3s"

    def test_out_of_range(self) -> None:
        with pytest.raises(OverflowError):
            Duration(1 << 63)
        with pytest.raises(OverflowError):
            Duration(MAX_NANOS) + 1

    def test_timedelta(self) -> None:
        assert Duration.from_timedelta(timedelta(seconds=1.5)) == 1_500 * MILLISECOND
        assert Duration(90 * SECOND).to_timedelta() == timedelta(seconds=90)
        assert Duration(1_500 * MILLISECOND).total_seconds() == 1.5

    def test_negative_timedelta_truncates_toward_zero(self) -> None:
        assert Duration(-1).to_timedelta() == timedelta(0)
        assert Duration(-1_500).to_timedelta() == timedelta(microseconds=-1)
        assert Duration(-1_500).to_timedelta() == -Duration(1_500).to_timedelta()


class Timeouts(BaseModel):
    connect: Duration
    read: Duration = Duration(0)


class TestPydantic:
    def test_validates_string_and_int(self) -> None:
        t = Timeouts.model_validate({"connect": "1m15s", "read": 5})
        assert isinstance(t.connect, Duration)
        assert t.connect == 75 * SECOND
        assert t.read == 5

    def test_validates_timedelta(self) -> None:
        t = Timeouts(connect=timedelta(minutes=1))
        assert t.connect == MINUTE

    def test_json_dump_is_string(self) -> None:
        t = Timeouts.model_validate({"connect": 75 * SECOND, "read": "5ns"})
        assert json.loads(t.model_dump_json()) == {"connect": "1m15s", "read": "5ns"}

    def test_python_dump_keeps_duration(self) -> None:
        t = Timeouts(connect="10s")
        assert isinstance(t.model_dump()["connect"], Duration)

    def test_validate_json_number(self) -> None:
        t = Timeouts.model_validate_json('{"connect": 75000000000}')
        assert t.connect == 75 * SECOND

    @pytest.mark.parametrize("value", ["10", True, 1.5, [1]])
    def test_rejects_invalid(self, value: object) -> None:
        with pytest.raises(ValidationError):
            Timeouts.model_validate({"connect": value})

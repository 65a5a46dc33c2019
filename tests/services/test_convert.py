"""Tests for ConvertService."""

from __future__ import annotations

import pytest

from nullconf.config.settings import NullconfSettings
from nullconf.services.convert import ConvertService


@pytest.fixture
def service(settings: NullconfSettings) -> ConvertService:
    return ConvertService(settings)


class TestParseDuration:
    def test_success(self, service: ConvertService) -> None:
        result = service.parse_duration("75s")
        assert result.ok
        assert result.op == "parse_duration"
        assert result.data == {"input": "75s", "duration": "1m15s", "nanoseconds": 75_000_000_000}

    def test_empty_is_zero(self, service: ConvertService) -> None:
        assert service.parse_duration("").data["duration"] == "0s"

    def test_invalid(self, service: ConvertService) -> None:
        result = service.parse_duration("10")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_DURATION"
        assert result.error.message == 'time: missing unit in duration "10"'
        assert result.error.detail == {"input": "10"}

    def test_overlong_input_is_a_failure(self, service: ConvertService) -> None:
        result = service.parse_duration("1" * 5000 + "s")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "INVALID_DURATION"
        assert result.error.message.startswith("time: invalid duration")

    def test_overlong_fraction(self, service: ConvertService) -> None:
        assert service.parse_duration("1." + "0" * 5000 + "s").data["duration"] == "1s"


class TestDurationFromJSON:
    def test_number(self, service: ConvertService) -> None:
        result = service.duration_from_json("75000000000")
        assert result.ok
        assert result.data["duration"] == "1m15s"
        assert result.data["json"] == '"1m15s"'

    def test_string(self, service: ConvertService) -> None:
        assert service.duration_from_json('"1.5h"').data["nanoseconds"] == 5_400_000_000_000

    def test_null_requires_nullable(self, service: ConvertService) -> None:
        result = service.duration_from_json("null")
        assert result.error is not None
        assert result.error.code == "INVALID_JSON"

    def test_nullable_null(self, service: ConvertService) -> None:
        result = service.duration_from_json("null", nullable=True)
        assert result.ok
        assert result.data == {"input": "null", "valid": False, "json": "null"}

    def test_nullable_value(self, service: ConvertService) -> None:
        result = service.duration_from_json('"10s"', nullable=True)
        assert result.data["valid"] is True
        assert result.data["duration"] == "10s"

    def test_malformed_json(self, service: ConvertService) -> None:
        result = service.duration_from_json("{")
        assert result.error is not None
        assert result.error.code == "INVALID_JSON"

    def test_overlong_number(self, service: ConvertService) -> None:
        result = service.duration_from_json("1" * 5000)
        assert result.error is not None
        assert result.error.code == "INVALID_JSON"

    def test_overlong_string(self, service: ConvertService) -> None:
        result = service.duration_from_json('"' + "1" * 5000 + 's"', nullable=True)
        assert result.error is not None
        assert result.error.code == "INVALID_DURATION"

    def test_bad_duration_string(self, service: ConvertService) -> None:
        result = service.duration_from_json('"3d"')
        assert result.error is not None
        assert result.error.code == "INVALID_DURATION"
        assert result.error.message == 'time: unknown unit "d" in duration "3d"'


class TestDecodeFields:
    def test_all_kinds(self, service: ConvertService) -> None:
        result = service.decode_fields(
            '{"name": "api", "on": true, "retries": 3, "ratio": 0.5, "timeout": "75s",'
            ' "hosts": ["a", "b"]}',
            [
                "name=string",
                "on=bool",
                "retries=int",
                "ratio=float",
                "timeout=duration",
                "hosts=strings",
            ],
        )
        assert result.ok
        assert result.data == {
            "fields": {
                "name": "api",
                "on": True,
                "retries": 3,
                "ratio": 0.5,
                "timeout": "1m15s",
                "hosts": ["a", "b"],
            },
            "count": 6,
        }

    def test_absent_fields_are_none(self, service: ConvertService) -> None:
        result = service.decode_fields({"retries": None}, ["retries=int", "timeout=duration"])
        assert result.data["fields"] == {"retries": None, "timeout": None}

    def test_decode_errors(self, service: ConvertService) -> None:
        result = service.decode_fields(
            {"retries": "3", "timeout": 5}, ["retries=int", "timeout=duration"]
        )
        assert result.error is not None
        assert result.error.code == "DECODE_FAILED"
        assert result.error.message.startswith("2 error(s) decoding:")
        assert result.error.detail["errors"] == [
            "error decoding 'retries': expected 'int', got 'string'",
            "error decoding 'timeout': expected 'string', got 'int'",
        ]

    @pytest.mark.parametrize("spec", ["retries", "retries=uint", "2x=int", "=int", "class=int"])
    def test_invalid_field_spec(self, service: ConvertService, spec: str) -> None:
        result = service.decode_fields("{}", [spec])
        assert result.error is not None
        assert result.error.code == "INVALID_FIELD_SPEC"
        assert "duration" in result.error.detail["kinds"]

    def test_invalid_json(self, service: ConvertService) -> None:
        result = service.decode_fields("{", ["a=int"])
        assert result.error is not None
        assert result.error.code == "INVALID_JSON"

    def test_overlong_number_in_document(self, service: ConvertService) -> None:
        result = service.decode_fields('{"a": ' + "1" * 5000 + "}", ["a=int"])
        assert result.error is not None
        assert result.error.code == "INVALID_JSON"

    def test_object_for_nullable_field(self, service: ConvertService) -> None:
        result = service.decode_fields({"timeout": {"oops": 1}}, ["timeout=duration"])
        assert result.error is not None
        assert result.error.detail["errors"] == [
            "error decoding 'timeout': expected 'string', got 'map'"
        ]

    def test_weak_settings(self) -> None:
        service = ConvertService(NullconfSettings(weakly_typed_input=True))
        result = service.decode_fields({"hosts": "a"}, ["hosts=strings"])
        assert result.data["fields"] == {"hosts": ["a"]}

    def test_error_unused_settings(self) -> None:
        service = ConvertService(NullconfSettings(error_unused=True))
        result = service.decode_fields({"a": 1, "b": 2}, ["a=int"])
        assert result.error is not None
        assert result.error.detail["errors"] == ["'' has invalid keys: b"]

    def test_duplicate_field(self, service: ConvertService) -> None:
        result = service.decode_fields("{}", ["a=int", "a=string"])
        assert result.error is not None
        assert result.error.code == "INVALID_FIELD_SPEC"
        assert result.error.message == "Invalid field declaration: 'a=string'"

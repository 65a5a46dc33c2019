"""ConvertService: duration parsing and document decoding for the CLI.

Each operation returns a :class:`ServiceResult`. Error codes:
  INVALID_DURATION    text does not match the duration grammar
  INVALID_JSON        raw input is not valid JSON, or has the wrong shape
  INVALID_FIELD_SPEC  a ``name=kind`` field declaration is malformed
  DECODE_FAILED       one or more document fields failed to decode
"""

from __future__ import annotations

import dataclasses
import json
import keyword
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from nullconf.decoding.errors import DecodeError
from nullconf.decoding.mapper import Decoder, DecoderConfig
from nullconf.domain.duration import Duration, DurationJSONError, DurationParseError
from nullconf.domain.null import (
    NullBool,
    NullDuration,
    NullFloat,
    NullInt,
    NullString,
    NullValue,
)
from nullconf.services.result import ServiceResult

if TYPE_CHECKING:
    from nullconf.config.settings import NullconfSettings

logger = logging.getLogger(__name__)

FIELD_KINDS: dict[str, Any] = {
    "string": NullString,
    "bool": NullBool,
    "int": NullInt,
    "float": NullFloat,
    "duration": NullDuration,
    "strings": list[str],
}


def _duration_data(duration: Duration) -> dict[str, Any]:
    return {"duration": str(duration), "nanoseconds": int(duration)}


def _field_default(kind: Any) -> dataclasses.Field[Any]:
    if kind is list[str]:
        return dataclasses.field(default_factory=list)
    return dataclasses.field(default_factory=kind)


def _valid_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _dump(value: Any) -> Any:
    if isinstance(value, NullValue):
        return value.model_dump(mode="json")
    return value


class ConvertService:
    """Parse durations and decode documents according to *settings*."""

    def __init__(self, settings: NullconfSettings) -> None:
        self._settings = settings

    def parse_duration(self, text: str) -> ServiceResult:
        """Parse *text* with the duration grammar (empty text is zero)."""
        op = "parse_duration"
        try:
            duration = Duration.from_text(text)
        except DurationParseError as exc:
            return ServiceResult.failure(op, "INVALID_DURATION", str(exc), input=text)
        return ServiceResult(ok=True, op=op, data={"input": text, **_duration_data(duration)})

    def duration_from_json(self, raw: str, *, nullable: bool = False) -> ServiceResult:
        """Decode a raw JSON value as a Duration, or a NullDuration if *nullable*."""
        op = "duration_from_json"
        try:
            if nullable:
                null = NullDuration.from_json(raw)
                data: dict[str, Any] = {"valid": null.valid, "json": null.to_json()}
                if null.valid:
                    data.update(_duration_data(null.value))
            else:
                duration = Duration.from_json(raw)
                data = {"json": duration.to_json(), **_duration_data(duration)}
        except DurationParseError as exc:
            return ServiceResult.failure(op, "INVALID_DURATION", str(exc), input=raw)
        except DurationJSONError as exc:
            return ServiceResult.failure(op, "INVALID_JSON", str(exc), input=raw)
        return ServiceResult(ok=True, op=op, data={"input": raw, **data})

    def decode_fields(
        self, document: str | Mapping[str, Any], fields: list[str]
    ) -> ServiceResult:
        """Decode *document* against ``name=kind`` field declarations.

        *kind* is one of ``string``, ``bool``, ``int``, ``float``,
        ``duration``, ``strings``. Absent fields come back as ``None``.
        """
        op = "decode_fields"
        declared: list[tuple[str, Any, dataclasses.Field[Any]]] = []
        for spec in fields:
            name, sep, kind_name = spec.partition("=")
            kind = FIELD_KINDS.get(kind_name.strip())
            name = name.strip()
            seen = any(name == other for other, _, _ in declared)
            if not sep or kind is None or seen or not _valid_name(name):
                return ServiceResult.failure(
                    op,
                    "INVALID_FIELD_SPEC",
                    f"Invalid field declaration: {spec!r}",
                    kinds=sorted(FIELD_KINDS),
                )
            declared.append((name, kind, _field_default(kind)))

        if isinstance(document, str):
            try:
                document = json.loads(document)
            except ValueError as exc:
                return ServiceResult.failure(op, "INVALID_JSON", f"Invalid JSON document: {exc}")

        target = dataclasses.make_dataclass("Document", declared, frozen=True)
        decoder = Decoder(
            DecoderConfig(
                result_type=target,
                weakly_typed_input=self._settings.weakly_typed_input,
                error_unused=self._settings.error_unused,
            )
        )
        try:
            result = decoder.decode(document)
        except DecodeError as exc:
            logger.debug("Document decode failed: %d error(s)", len(exc.errors))
            return ServiceResult.failure(op, "DECODE_FAILED", exc.message, errors=exc.errors)

        values = {f.name: _dump(getattr(result, f.name)) for f in dataclasses.fields(result)}
        return ServiceResult(ok=True, op=op, data={"fields": values, "count": len(values)})

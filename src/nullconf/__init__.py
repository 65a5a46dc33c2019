"""nullconf: duration and nullable value types for configuration decoding."""

from __future__ import annotations

from nullconf.decoding.errors import DecodeError, KindMismatchError
from nullconf.decoding.hook import null_decoder
from nullconf.decoding.mapper import Decoder, DecoderConfig, decode
from nullconf.domain.duration import Duration, DurationParseError, parse_duration
from nullconf.domain.null import (
    NullBool,
    NullDuration,
    NullFloat,
    NullInt,
    NullString,
    new_null_duration,
    null_duration_from,
)

__version__ = "0.3.0"

__all__ = [
    "DecodeError",
    "Decoder",
    "DecoderConfig",
    "Duration",
    "DurationParseError",
    "KindMismatchError",
    "NullBool",
    "NullDuration",
    "NullFloat",
    "NullInt",
    "NullString",
    "__version__",
    "decode",
    "new_null_duration",
    "null_decoder",
    "null_duration_from",
    "parse_duration",
]

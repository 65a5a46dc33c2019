"""Mapping layer: decode a loosely-typed mapping into a typed structure.

Targets are dataclasses or pydantic models. For every destination field
the decoder looks up the source key (case-insensitive), runs the decode
hook, then applies the default conversion for whatever the hook passed
through. Field errors are collected and raised once as a
:class:`~nullconf.decoding.errors.DecodeError`; no partially decoded
instance is ever returned.

Field paths in messages: ``field``, ``parent.field``, ``field[0]``.
"""

from __future__ import annotations

import dataclasses
import logging
import types
import typing
from collections.abc import Mapping
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, Field, ValidationError

from nullconf.decoding.errors import ConversionError, DecodeError
from nullconf.decoding.hook import DecodeHook, null_decoder
from nullconf.domain.duration import Duration
from nullconf.domain.kinds import UnsupportedKindError, ValueKind, kind_of

logger = logging.getLogger(__name__)

# Marks a field whose value failed to decode.
_FAILED = object()

_TRUE_TEXTS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TEXTS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


class DecoderConfig(BaseModel):
    """Options for a :class:`Decoder`.

    Attributes:
        result_type: Dataclass or pydantic model to build.
        decode_hook: Called as ``hook(declared, value)`` before default
            conversion. None disables hooks.
        weakly_typed_input: Allow lenient scalar conversions (``"1"`` to
            int, bool to string, ...) and promote a single string to a
            one-element list.
        error_unused: Report source keys that match no field.
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    result_type: type[Any]
    decode_hook: DecodeHook | None = Field(default=null_decoder)
    weakly_typed_input: bool = False
    error_unused: bool = False


def _struct_fields(target: type[Any]) -> list[tuple[str, Any, bool]]:
    """Return ``(name, declared type, has_default)`` for each field of *target*."""
    if dataclasses.is_dataclass(target):
        hints = typing.get_type_hints(target)
        return [
            (
                f.name,
                hints[f.name],
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING,
            )
            for f in dataclasses.fields(target)
            if f.init
        ]
    if isinstance(target, type) and issubclass(target, BaseModel):
        return [
            (name, info.annotation, not info.is_required())
            for name, info in target.model_fields.items()
        ]
    msg = f"unsupported decode target: {target!r}"
    raise TypeError(msg)


def _is_struct(declared: Any) -> bool:
    return dataclasses.is_dataclass(declared) or (
        isinstance(declared, type) and issubclass(declared, BaseModel)
    )


def _type_name(declared: Any) -> str:
    return getattr(declared, "__name__", str(declared))


def _unconvertible(path: str, declared: Any, value: Any, kind: ValueKind) -> ConversionError:
    return ConversionError(
        f"'{path}' expected type '{_type_name(declared)}', "
        f"got unconvertible type '{kind}', value: '{value}'"
    )


class Decoder:
    """Decode mappings into instances of ``config.result_type``.

    Usage::

        decoder = Decoder(DecoderConfig(result_type=Options))
        options = decoder.decode({"timeout": "10s", "retries": 3})
    """

    def __init__(self, config: DecoderConfig) -> None:
        self.config = config

    def decode(self, data: Any) -> Any:
        """Decode *data* into a new result instance.

        Raises:
            DecodeError: One or more fields failed; all failures are listed.
        """
        errors: list[str] = []
        result = self._decode_struct("", self.config.result_type, data, errors)
        logger.debug(
            "Decoded %s with %d error(s)",
            _type_name(self.config.result_type),
            len(errors),
        )
        if errors:
            raise DecodeError(errors)
        return result

    # --- Structures ---

    def _decode_struct(self, name: str, target: Any, data: Any, errors: list[str]) -> Any:
        try:
            kind = kind_of(data)
        except UnsupportedKindError as exc:
            errors.append(f"error decoding '{name}': {exc}")
            return _FAILED
        if kind is not ValueKind.MAP:
            errors.append(f"'{name}' expected a map, got '{kind}'")
            return _FAILED

        fields = _struct_fields(target)
        keys = {str(key).lower(): key for key in data}
        error_count = len(errors)
        values: dict[str, Any] = {}
        used: set[Any] = set()
        unset: list[str] = []

        for field_name, declared, has_default in fields:
            key = field_name if field_name in data else keys.get(field_name.lower())
            if key is None:
                if not has_default:
                    unset.append(field_name)
                continue
            used.add(key)
            path = f"{name}.{field_name}" if name else field_name
            value = self._decode_value(path, declared, data[key], errors)
            if value is not _FAILED:
                values[field_name] = value

        if unset:
            errors.append(f"'{name}' has unset fields: {', '.join(unset)}")
        if self.config.error_unused:
            unused = sorted(str(key) for key in data if key not in used)
            if unused:
                errors.append(f"'{name}' has invalid keys: {', '.join(unused)}")
        if len(errors) > error_count:
            return _FAILED

        if isinstance(target, type) and issubclass(target, BaseModel):
            try:
                return target.model_validate(values)
            except ValidationError as exc:
                errors.append(f"error decoding '{name}': {exc}")
                return _FAILED
        return target(**values)

    # --- Values ---

    def _decode_value(self, path: str, declared: Any, value: Any, errors: list[str]) -> Any:
        if (
            self.config.weakly_typed_input
            and isinstance(value, str)
            and get_origin(declared) is list
        ):
            value = [value]

        hook = self.config.decode_hook
        if hook is not None:
            try:
                value = hook(declared, value)
            except ValueError as exc:
                locate = getattr(exc, "locate", None)
                where = locate(path) if locate is not None else path
                errors.append(f"error decoding '{where}': {exc}")
                return _FAILED

        try:
            return self._convert(path, declared, value, errors)
        except ConversionError as exc:
            errors.append(str(exc))
        except ValueError as exc:
            errors.append(f"error decoding '{path}': {exc}")
        return _FAILED

    def _convert(self, path: str, declared: Any, value: Any, errors: list[str]) -> Any:
        """Default conversion for values the hook passed through."""
        if declared is Any or declared is object:
            return value

        origin = get_origin(declared)
        if origin is Union or origin is types.UnionType:
            return self._convert_optional(path, declared, value, errors)
        if origin is list:
            return self._convert_list(path, declared, value, errors)
        if origin is dict:
            return self._convert_dict(path, declared, value, errors)
        if origin is not None:
            return value

        if (
            isinstance(declared, type)
            and isinstance(value, declared)
            and not (declared is int and isinstance(value, bool))
        ):
            return value
        if _is_struct(declared):
            return self._decode_struct(path, declared, value, errors)
        if declared is Duration:
            try:
                return Duration.coerce(value)
            except (ValueError, OverflowError) as exc:
                msg = f"error decoding '{path}': {exc}"
                raise ConversionError(msg) from exc
        if declared in (str, bool, int, float):
            return self._convert_scalar(path, declared, value)
        return value

    def _convert_optional(
        self, path: str, declared: Any, value: Any, errors: list[str]
    ) -> Any:
        if value is None:
            return None
        members = [arg for arg in get_args(declared) if arg is not type(None)]
        if len(members) != 1:
            return value
        return self._decode_value(path, members[0], value, errors)

    def _convert_list(self, path: str, declared: Any, value: Any, errors: list[str]) -> Any:
        kind = kind_of(value)
        if kind is not ValueKind.SLICE:
            msg = f"'{path}': source data must be an array or slice, got {kind}"
            raise ConversionError(msg)
        args = get_args(declared)
        item_type = args[0] if args else Any
        items = [
            self._decode_value(f"{path}[{index}]", item_type, item, errors)
            for index, item in enumerate(value)
        ]
        return _FAILED if any(item is _FAILED for item in items) else items

    def _convert_dict(self, path: str, declared: Any, value: Any, errors: list[str]) -> Any:
        kind = kind_of(value)
        if kind is not ValueKind.MAP:
            msg = f"'{path}' expected a map, got '{kind}'"
            raise ConversionError(msg)
        args = get_args(declared)
        value_type = args[1] if len(args) == 2 else Any
        result = {
            key: self._decode_value(f"{path}[{key}]", value_type, item, errors)
            for key, item in value.items()
        }
        return _FAILED if any(item is _FAILED for item in result.values()) else result

    def _convert_scalar(self, path: str, declared: type, value: Any) -> Any:
        kind = kind_of(value)
        weak = self.config.weakly_typed_input

        if declared is str:
            if kind is ValueKind.STRING:
                return value
            if weak and kind is ValueKind.BOOL:
                return "1" if value else "0"
            if weak and kind in (ValueKind.INT, ValueKind.FLOAT64):
                return str(value)
        elif declared is bool:
            if kind is ValueKind.BOOL:
                return value
            if weak and kind in (ValueKind.INT, ValueKind.FLOAT64):
                return value != 0
            if weak and kind is ValueKind.STRING:
                if value == "" or value in _FALSE_TEXTS:
                    return False
                if value in _TRUE_TEXTS:
                    return True
                msg = f"cannot parse '{path}' as bool: invalid syntax {value!r}"
                raise ConversionError(msg)
        elif declared is int:
            if kind is ValueKind.INT:
                return value
            if weak and kind is ValueKind.BOOL:
                return int(value)
            if weak and kind is ValueKind.FLOAT64 and value.is_integer():
                return int(value)
            if weak and kind is ValueKind.STRING:
                try:
                    return int(value or "0", 0)
                except ValueError as exc:
                    msg = f"cannot parse '{path}' as int: {exc}"
                    raise ConversionError(msg) from exc
        elif declared is float:
            if kind in (ValueKind.INT, ValueKind.FLOAT64):
                return float(value)
            if weak and kind is ValueKind.BOOL:
                return 1.0 if value else 0.0
            if weak and kind is ValueKind.STRING:
                try:
                    return float(value or "0")
                except ValueError as exc:
                    msg = f"cannot parse '{path}' as float: {exc}"
                    raise ConversionError(msg) from exc

        raise _unconvertible(path, declared, value, kind)


def decode(data: Any, result_type: type[Any], **options: Any) -> Any:
    """Decode *data* into *result_type* with the nullable decode hook.

    Keyword options are passed to :class:`DecoderConfig`.
    """
    config = DecoderConfig(result_type=result_type, **options)
    return Decoder(config).decode(data)

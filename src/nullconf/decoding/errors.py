"""Decode error types.

Field errors are collected as strings of the form
``error decoding '<field>': expected '<x>', got '<y>'`` and raised once
per decode call as a :class:`DecodeError`.
"""

from __future__ import annotations

from collections.abc import Iterable


class KindMismatchError(ValueError):
    """Source value's kind disagrees with the declared field kind.

    Attributes:
        expected: Expected kind label (``"int"``, ``"float32 or float64"``...).
        actual: Kind label of the offending value.
        index: Position within a sequence field, if the mismatch is an element.
    """

    def __init__(self, expected: str, actual: str, *, index: int | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.index = index
        super().__init__(f"expected '{expected}', got '{actual}'")

    def locate(self, name: str) -> str:
        """Field path for error messages, including the element index."""
        return name if self.index is None else f"{name}[{self.index}]"


class ConversionError(ValueError):
    """Default conversion failed; the message is reported verbatim."""


class DecodeError(ValueError):
    """Aggregate of every field error from one decode call."""

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = sorted(errors)
        super().__init__(self.message)

    @property
    def message(self) -> str:
        points = "\n".join(f"* {err}" for err in self.errors)
        return f"{len(self.errors)} error(s) decoding:\n\n{points}"

    def __str__(self) -> str:
        return self.message

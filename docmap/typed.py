"""Typed extraction of document values.

Each extractor takes the raw value found at a key or pointer and either
returns it converted to the target Python type or raises ``TypeMismatch``.
Documents decoded from JSON text hold ints and floats interchangeably, so
the numeric extractors accept both.
"""
from __future__ import annotations

import math
import re
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, List

from .errors import TypeMismatch, ValueParseError
from .records import to_iterable, type_name

STRING = 'STRING'
BOOLEAN = 'BOOLEAN'
INT = 'INT or FLOAT64'
FLOAT = 'FLOAT64'
TIME = 'TIME (RFC3339)'
DECIMAL = 'DECIMAL'
OBJECT = 'OBJECT'
ARRAY = 'ARRAY'

_RFC3339 = re.compile(r'\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})', re.ASCII)
_DECIMAL = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?', re.ASCII)


class Location:
    """Where a value was read from, used to build mismatch errors lazily."""

    __slots__ = ('path', 'by_pointer', '_snapshot')

    def __init__(self, path: str, snapshot: Callable[[], str], by_pointer: bool = False):
        self.path = path
        self.by_pointer = by_pointer
        self._snapshot = snapshot

    def mismatch(self, expected: str, value: Any) -> TypeMismatch:
        return TypeMismatch(self.path, expected, type_name(value), self._snapshot(), self.by_pointer)

    def unparsable(self, expected: str, raw: str) -> ValueParseError:
        return ValueParseError(self.path, expected, raw, self._snapshot(), self.by_pointer)


def as_string(value: Any, where: Location) -> str:
    if not isinstance(value, str):
        raise where.mismatch(STRING, value)
    return value


def as_bool(value: Any, where: Location) -> bool:
    if not isinstance(value, bool):
        raise where.mismatch(BOOLEAN, value)
    return value


def as_int(value: Any, where: Location) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float) and math.isfinite(value):
        # Truncates toward zero, matching a plain int() conversion.
        return int(value)
    raise where.mismatch(INT, value)


def as_float(value: Any, where: Location) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise where.mismatch(FLOAT, value)


def as_time(value: Any, where: Location) -> datetime:
    raw = as_string(value, where)
    # fromisoformat alone also takes week dates, basic format and short times.
    if not _RFC3339.fullmatch(raw):
        raise where.unparsable(TIME, raw)
    try:
        return datetime.fromisoformat(raw.upper())
    except ValueError:
        raise where.unparsable(TIME, raw) from None


def as_decimal(value: Any, where: Location) -> Decimal:
    raw = as_string(value, where)
    if not _DECIMAL.fullmatch(raw):
        raise where.unparsable(DECIMAL, raw)
    try:
        parsed = Decimal(raw)
    except InvalidOperation:
        raise where.unparsable(DECIMAL, raw) from None
    if not parsed.is_finite():
        raise where.unparsable(DECIMAL, raw)
    return parsed


def as_mapping(value: Any, where: Location) -> Mapping:
    if not isinstance(value, Mapping):
        raise where.mismatch(OBJECT, value)
    return value


def as_array(value: Any, where: Location) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise where.mismatch(ARRAY, value)
    return to_iterable(value)

"""Value classification for the nested document model.

A value is one of: None, bool, number (int or float), str, list, or an
object. Objects are any ``Mapping`` - a plain ``dict`` as produced by the
JSON/YAML decoders, or a ``Document`` wrapping one.
"""
from __future__ import annotations

from collections.abc import Mapping
from numbers import Number
from typing import Any, List

from .errors import NotIterable


def is_object(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a JSON number.
    return isinstance(value, Number) and not isinstance(value, bool)


def is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list))


def type_name(value: Any) -> str:
    return type(value).__name__


def to_iterable(value: Any) -> List[Any]:
    """Return ``value`` as a list of its elements.

    Arrays are always lists after decoding; tuples built by callers are
    accepted too. Anything else raises ``NotIterable``.
    """
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    raise NotIterable(type_name(value))

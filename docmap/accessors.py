from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, List, Tuple

from .errors import IndexOutOfRange, MalformedPath, MissingKey, NotContainer, PathNotFound
from .paths import join_pointer, parse_index, split_pointer
from .records import is_container, type_name

logger = logging.getLogger(__name__)


def _step(container: Any, segment: str, segments: List[str], depth: int) -> Any:
    """Descend one segment into ``container``."""
    if isinstance(container, Mapping):
        if segment not in container:
            raise MissingKey(join_pointer(segments[:depth + 1]), segment)
        return container[segment]

    if isinstance(container, list):
        index = parse_index(segment)
        if index is None or index >= len(container):
            raise IndexOutOfRange(join_pointer(segments[:depth + 1]), segment, len(container))
        return container[index]

    raise NotContainer(join_pointer(segments[:depth + 1]), segment, type_name(container))


def _walk(data: Any, segments: List[str]) -> Any:
    val = data
    for depth, segment in enumerate(segments):
        val = _step(val, segment, segments, depth)
    return val


def _parent_of(data: Any, pointer: str) -> Tuple[Any, str, List[str]]:
    segments = split_pointer(pointer)
    if not segments:
        raise MalformedPath(pointer, "the document root cannot be replaced or removed")

    parent = _walk(data, segments[:-1])
    if not is_container(parent):
        raise NotContainer(pointer, segments[-1], type_name(parent))
    return parent, segments[-1], segments


def get_value_by_pointer(data: Any, pointer: str) -> Any:
    """Retrieve the value at ``pointer``; '' returns ``data`` itself.

    Raises ``MalformedPath``, ``PathNotFound`` (``MissingKey`` or
    ``IndexOutOfRange``) or ``NotContainer`` when a scalar is in the way.
    """
    return _walk(data, split_pointer(pointer))


def pointer_exists(data: Any, pointer: str) -> bool:
    """True when ``pointer`` resolves; only an absent target yields False."""
    try:
        _walk(data, split_pointer(pointer))
    except PathNotFound:
        return False
    return True


def set_value_by_pointer(data: Any, pointer: str, value: Any) -> None:
    """Set a value in place; every parent on the way must already exist."""
    parent, last, segments = _parent_of(data, pointer)

    if isinstance(parent, Mapping):
        if not isinstance(parent, MutableMapping):
            raise NotContainer(pointer, last, type_name(parent))
        parent[last] = value
        return

    index = parse_index(last)
    if index is None or index >= len(parent):
        raise IndexOutOfRange(pointer, last, len(parent))
    parent[index] = value


def set_value_by_pointer_recursive(data: Any, pointer: str, value: Any) -> None:
    """Like ``set_value_by_pointer``, creating missing parent objects first.

    Only a missing key creates a container; a wrong type on the way, an
    index out of range or a malformed pointer still raise.
    """
    segments = split_pointer(pointer)
    for depth in range(1, len(segments)):
        prefix = join_pointer(segments[:depth])
        try:
            _walk(data, segments[:depth])
        except MissingKey:
            logger.debug("creating empty object at %s", prefix)
            set_value_by_pointer(data, prefix, {})

    set_value_by_pointer(data, pointer, value)


def delete_value_by_pointer(data: Any, pointer: str) -> Any:
    """Remove and return the entry at ``pointer``."""
    parent, last, _ = _parent_of(data, pointer)

    if isinstance(parent, Mapping):
        if last not in parent:
            raise MissingKey(pointer, last)
        if not isinstance(parent, MutableMapping):
            raise NotContainer(pointer, last, type_name(parent))
        return parent.pop(last)

    index = parse_index(last)
    if index is None or index >= len(parent):
        raise IndexOutOfRange(pointer, last, len(parent))
    return parent.pop(index)

from __future__ import annotations

from typing import Iterable, List, Optional

from .errors import MalformedPath


def escape_pointer_segment(segment: str) -> str:
    """Escape a single key segment for JSONPointer representation.

    - '~' becomes '~0' first, so an escaped '/' is never double-escaped.
    - '/' becomes '~1' so keys like 'a/b' remain one segment.
    """
    if not isinstance(segment, str):
        segment = str(segment)
    return segment.replace('~', '~0').replace('/', '~1')


def unescape_pointer_segment(segment: str) -> str:
    if segment is None:
        return ''
    out: List[str] = []
    i = 0
    while i < len(segment):
        ch = segment[i]
        if ch == '~' and i + 1 < len(segment) and segment[i + 1] in '01':
            out.append('/' if segment[i + 1] == '1' else '~')
            i += 2
        else:
            # Unknown escapes are kept verbatim.
            out.append(ch)
            i += 1
    return ''.join(out)


def split_pointer(pointer: str) -> List[str]:
    """Split a JSONPointer into unescaped segments.

    '' addresses the root and yields no segments; '/' yields one empty key.
    """
    if pointer is None or not isinstance(pointer, str):
        raise MalformedPath(repr(pointer), "pointer must be a string")
    if pointer == '':
        return []
    if not pointer.startswith('/'):
        raise MalformedPath(pointer, "pointer must be empty or start with '/'")
    return [unescape_pointer_segment(part) for part in pointer[1:].split('/')]


def join_pointer(segments: Iterable[str]) -> str:
    return ''.join('/' + escape_pointer_segment(s) for s in segments)


def parse_index(segment: str) -> Optional[int]:
    """Return the array index a segment denotes, or None if it is not one.

    Only canonical non-negative decimals count: '0', '7', '12' but not
    '-1', '01' or '+3'.
    """
    if not segment or not segment.isdigit() or not segment.isascii():
        return None
    if len(segment) > 1 and segment[0] == '0':
        return None
    return int(segment)


def dotted(path: Iterable[str]) -> str:
    """Join nested key positions as 'a.b.c' (no escaping of dots in keys)."""
    return '.'.join(path)


def split_dotted(path: str) -> List[str]:
    if not path:
        return []
    return [p for p in path.split('.') if p != '']

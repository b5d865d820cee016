from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Set

from .paths import dotted, join_pointer, split_dotted
from .records import is_object


def collect_keys(data: Mapping, path: Optional[List[str]] = None, keys: Optional[Set[str]] = None) -> Set[str]:
    """Recursively find every leaf key of an object, nested keys as 'a.b.c'.

    Only objects are descended into; lists and scalars are leaves. An empty
    nested object contributes no key at all.
    """
    if keys is None:
        keys = set()
    if path is None:
        path = []

    for k, v in data.items():
        if is_object(v):
            collect_keys(v, path + [k], keys)
        else:
            keys.add(dotted(path + [k]))

    return keys


def build_tree_from_keys(keys: List[str]) -> Dict[str, Any]:
    """Convert dotted leaf keys into a nested dictionary tree.

    Leaf nodes are strings (the full dotted key); branch nodes are
    dictionaries. Collected leaf keys never overlap with branches, but keys
    that themselves contain dots can produce both 'a' and 'a.b'; the value
    for 'a' is then stored under '__self__'.
    """
    tree: Dict[str, Any] = {}
    for key in sorted(keys):
        parts = split_dotted(key)
        if not parts:
            continue
        current = tree
        for part in parts[:-1]:
            if part not in current:
                current[part] = {}

            if isinstance(current[part], str):
                current[part] = {'__self__': current[part]}

            current = current[part]

        last_part = parts[-1]
        if last_part in current:
            if isinstance(current[last_part], dict):
                current[last_part]['__self__'] = key
        else:
            current[last_part] = key
    return tree


def find_list_pointers(data: Any, parent: Optional[List[str]] = None) -> List[str]:
    """Find the JSONPointers of every list of objects in ``data``.

    A root list yields '' (the root pointer). Lists are inspected through
    their first element only.
    """
    if parent is None:
        parent = []

    pointers: List[str] = []
    if isinstance(data, Mapping):
        for k, v in data.items():
            current = parent + [k]
            if isinstance(v, list):
                if v and isinstance(v[0], Mapping):
                    pointers.append(join_pointer(current))
                    pointers.extend(find_list_pointers(v[0], current + ['0']))
            elif isinstance(v, Mapping):
                pointers.extend(find_list_pointers(v, current))
    elif isinstance(data, list) and not parent:
        pointers.append('')
        if data and isinstance(data[0], Mapping):
            pointers.extend(find_list_pointers(data[0], ['0']))
    return sorted(pointers)

"""Project a list of documents onto a delimited text table.

The header is the sorted set of dotted leaf keys of the FIRST document
only. A later document carrying a leaf key the first one lacks fails the
whole projection with ``UnexpectedKey``; callers must put a
representative document first.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .codecs import encode_json
from .document import Document
from .errors import EmptyInput, SerializationError, UnexpectedKey
from .paths import dotted
from .records import is_number, is_object
from .schema_utils import collect_keys

logger = logging.getLogger(__name__)

PLACEHOLDER = ''


def _format_number(value: Any) -> str:
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return str(value)


def coerce_leaf(value: Any) -> Any:
    """Prepare a leaf for text output.

    Strings lose their newlines, numbers stay numbers, everything else is
    stringified as compact JSON.
    """
    if isinstance(value, str):
        return value.replace('\n', '')
    if is_number(value):
        return value
    try:
        return encode_json(value).decode('utf-8')
    except SerializationError:
        return str(value)


def collect_values(data: Mapping, row: Dict[str, Any], path: Optional[List[str]] = None) -> None:
    """Fill ``row`` with the coerced leaves of ``data``; keys must be in the row."""
    if path is None:
        path = []

    for k, v in data.items():
        if is_object(v):
            collect_values(v, row, path + [k])
            continue

        key = dotted(path + [k])
        if key not in row:
            raise UnexpectedKey(key)
        row[key] = coerce_leaf(v)


def format_cell(value: Any, separator: str) -> str:
    if isinstance(value, str):
        if separator in value:
            # Quotes are dropped, not escaped.
            return '"' + value.replace('"', '') + '"'
        return value
    if is_number(value):
        return _format_number(value)
    return str(value)


def project_rows(documents: Sequence[Any], separator: str = ',') -> Tuple[List[str], List[List[str]]]:
    """Return the sorted header and one list of formatted cells per document."""
    if not documents:
        raise EmptyInput()

    docs = [Document.normalize(d) for d in documents]
    header = sorted(collect_keys(docs[0]))

    rows: List[List[str]] = []
    for doc in docs:
        row: Dict[str, Any] = dict.fromkeys(header, PLACEHOLDER)
        collect_values(doc, row)
        rows.append([format_cell(row[key], separator) for key in header])

    logger.debug("projected %d document(s) onto %d column(s)", len(rows), len(header))
    return header, rows


def to_csv(documents: Sequence[Any], separator: str = ',') -> bytes:
    """Render documents as delimited text: a header line, then one line per document."""
    header, rows = project_rows(documents, separator)

    lines = [separator.join(header)]
    lines.extend(separator.join(cells) for cells in rows)
    return ''.join(line + '\n' for line in lines).encode('utf-8')

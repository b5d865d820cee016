from __future__ import annotations

import os
from typing import Any, List

from .codecs import decode_json, decode_yaml
from .document import Document
from .records import to_iterable

YAML_EXTENSIONS = ('.yaml', '.yml')


def _is_yaml(name: Any) -> bool:
    return isinstance(name, str) and name.lower().endswith(YAML_EXTENSIONS)


def read_content(file_obj) -> Any:
    """Decode JSON or YAML from an uploaded file, an open stream or a file path.

    YAML is chosen by file extension; everything else is read as JSON.
    """
    if file_obj is None:
        raise ValueError("No file uploaded.")

    if hasattr(file_obj, 'read'):
        if hasattr(file_obj, 'seek'):
            file_obj.seek(0)
        content = file_obj.read()
        if isinstance(content, str):
            content = content.encode('utf-8')
        name = getattr(file_obj, 'name', None)
    else:
        # Gradio hands over wrappers exposing the temp file path as .name.
        if isinstance(file_obj, (str, os.PathLike)):
            name = os.fspath(file_obj)
        else:
            name = file_obj.name
        with open(name, 'rb') as f:
            content = f.read()

    if _is_yaml(name):
        return decode_yaml(content)
    return decode_json(content)


def documents_at(data: Any, pointer: str = '') -> List[Document]:
    """Resolve the collection of documents stored at ``pointer``.

    The target may be a list of objects or a single object, which then
    forms a one-document collection.
    """
    if data is None:
        return []

    if isinstance(data, dict):
        target = Document(data).get_at(pointer)
    elif pointer:
        target = Document({'root': data}).get_at('/root' + pointer)
    else:
        target = data

    if isinstance(target, (list, tuple)):
        return [Document.normalize(item) for item in to_iterable(target)]
    return [Document.normalize(target)]

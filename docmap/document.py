"""The ``Document`` type: a JSON object with pointer navigation and typed access.

A ``Document`` wraps a plain ``dict`` (``Document.data``) and does not copy
it: ``Document(d)`` and ``Document.from_map(d)`` alias ``d``, and
``get_document`` returns a view whose mutations show through in the parent.
Use ``copy()`` whenever an independent tree is needed; it round trips
through JSON and therefore also reduces foreign objects (dates, decimals,
nested documents) to their serializable form.

Fallible methods raise ``DocumentError`` subclasses. ``doc.must.<method>``
and ``Document.must.<constructor>`` raise ``DocumentPanic`` instead.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from . import codecs, typed
from .accessors import (
    delete_value_by_pointer,
    get_value_by_pointer,
    pointer_exists,
    set_value_by_pointer,
    set_value_by_pointer_recursive,
)
from .errors import (
    DecodeError,
    KeyNotFound,
    SchemaValidationError,
    SchemaViolation,
    SerializationError,
    UnsupportedType,
)
from .must import MustDescriptor
from .paths import escape_pointer_segment
from .records import type_name

logger = logging.getLogger(__name__)

SchemaLike = Union[Mapping, bytes, str]


def _unwrap(value: Any) -> Any:
    if isinstance(value, Document):
        return value.data
    return value


def _require_object(decoded: Any, codec: str) -> Dict[str, Any]:
    if not isinstance(decoded, dict):
        raise DecodeError(codec, TypeError(f"top-level value is {type_name(decoded)}, expected an object"))
    return decoded


class Document(MutableMapping):
    must = MustDescriptor()

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = {} if data is None else data

    # --- construction -------------------------------------------------

    @classmethod
    def empty(cls) -> 'Document':
        return cls({})

    @classmethod
    def from_map(cls, mapa: Mapping) -> 'Document':
        if isinstance(mapa, Document):
            return cls(mapa.data)
        if not isinstance(mapa, dict):
            raise UnsupportedType(type_name(mapa))
        return cls(mapa)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Document':
        return cls(_require_object(codecs.decode_json(data), "JSON"))

    @classmethod
    def from_yaml_bytes(cls, data: bytes) -> 'Document':
        decoded = codecs.decode_yaml(data)
        if decoded is None:
            return cls.empty()
        return cls(_require_object(decoded, "YAML"))

    @classmethod
    def from_yaml_map(cls, mapa: Mapping) -> 'Document':
        """Build from a YAML-decoded mapping whose keys may not be strings."""
        return cls(_require_object(codecs.jsonify(mapa), "YAML"))

    @classmethod
    def from_yaml_file(cls, path: str) -> 'Document':
        try:
            with open(path, 'rb') as f:
                content = f.read()
        except OSError as exc:
            raise DecodeError("YAML", exc) from exc
        return cls.from_yaml_bytes(content)

    @classmethod
    def from_stream(cls, stream) -> 'Document':
        """Read a JSON object from a binary or text stream."""
        try:
            content = stream.read()
        except OSError as exc:
            raise DecodeError("JSON", exc) from exc
        if isinstance(content, str):
            content = content.encode('utf-8')
        return cls.from_bytes(content)

    @classmethod
    def from_string_list(cls, keys: Iterable[str]) -> 'Document':
        """Set-like document: every key maps to ``None``."""
        return cls({key: None for key in keys})

    @classmethod
    def from_list(cls, items: Iterable[Any]) -> 'Document':
        output = cls.empty()
        for index, key in enumerate(items):
            if not isinstance(key, str):
                raise UnsupportedType(type_name(key), f"entry with index: {index} is not a STRING")
            output.data[key] = None
        return output

    @classmethod
    def normalize(cls, value: Any) -> 'Document':
        """Accept a Document, a plain dict or JSON bytes; anything else fails."""
        if isinstance(value, Document):
            return value
        if isinstance(value, dict):
            return cls(value)
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(bytes(value))
        raise UnsupportedType(type_name(value))

    # --- mapping protocol ---------------------------------------------

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.data[key] = value

    def __delitem__(self, key: str) -> None:
        del self.data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Document({self.data!r})"

    def __str__(self) -> str:
        return self.to_bytes().decode('utf-8')

    def is_empty(self) -> bool:
        return not self.data

    def keys_list(self) -> List[str]:
        return list(self.data)

    # --- serialization ------------------------------------------------

    def to_bytes(self) -> bytes:
        return codecs.encode_json(self.data)

    def to_yaml_bytes(self) -> bytes:
        return codecs.encode_yaml(self.data)

    def to_plain(self) -> Dict[str, Any]:
        return codecs.decode_json(self.to_bytes())

    def copy(self) -> 'Document':
        return Document.from_bytes(self.to_bytes())

    def digest(self) -> bytes:
        return codecs.digest(self.to_bytes())

    def wrapped_result_bytes(self) -> bytes:
        return codecs.encode_json({'result': self.data})

    def _snapshot(self) -> str:
        try:
            return str(self)
        except SerializationError:
            return repr(self.data)

    # --- navigation ---------------------------------------------------

    def get_key(self, key: str) -> Any:
        if key not in self.data:
            raise KeyNotFound(key, self._snapshot())
        return self.data[key]

    def get_at(self, pointer: str) -> Any:
        return get_value_by_pointer(self.data, pointer)

    def exists_at(self, pointer: str) -> bool:
        return pointer_exists(self.data, pointer)

    def set_at(self, pointer: str, value: Any) -> None:
        set_value_by_pointer(self.data, pointer, _unwrap(value))

    def set_at_recursive(self, pointer: str, value: Any) -> None:
        set_value_by_pointer_recursive(self.data, pointer, _unwrap(value))

    def delete_at(self, pointer: str) -> Any:
        return delete_value_by_pointer(self.data, pointer)

    def inject(self, pointer: str, value: Any) -> None:
        """Copy the top-level keys of ``value`` under ``pointer``.

        The target object is created (one level only) if missing; existing
        keys in it are overwritten.
        """
        source = Document.normalize(value)
        if not self.exists_at(pointer):
            self.set_at(pointer, {})
        for key, item in source.data.items():
            self.set_at(pointer + '/' + escape_pointer_segment(key), item)

    # --- typed access -------------------------------------------------

    def _typed_key(self, key: str, extract: Callable[[Any, typed.Location], Any]) -> Any:
        return extract(self.get_key(key), typed.Location(key, self._snapshot))

    def _typed_pointer(self, pointer: str, extract: Callable[[Any, typed.Location], Any]) -> Any:
        return extract(self.get_at(pointer), typed.Location(pointer, self._snapshot, by_pointer=True))

    def get_string(self, key: str) -> str:
        return self._typed_key(key, typed.as_string)

    def get_string_at(self, pointer: str) -> str:
        return self._typed_pointer(pointer, typed.as_string)

    def get_bool(self, key: str) -> bool:
        return self._typed_key(key, typed.as_bool)

    def get_bool_at(self, pointer: str) -> bool:
        return self._typed_pointer(pointer, typed.as_bool)

    def get_int(self, key: str) -> int:
        return self._typed_key(key, typed.as_int)

    def get_int_at(self, pointer: str) -> int:
        return self._typed_pointer(pointer, typed.as_int)

    def get_float(self, key: str) -> float:
        return self._typed_key(key, typed.as_float)

    def get_float_at(self, pointer: str) -> float:
        return self._typed_pointer(pointer, typed.as_float)

    def get_time(self, key: str) -> datetime:
        return self._typed_key(key, typed.as_time)

    def get_time_at(self, pointer: str) -> datetime:
        return self._typed_pointer(pointer, typed.as_time)

    def get_decimal(self, key: str) -> Decimal:
        return self._typed_key(key, typed.as_decimal)

    def get_decimal_at(self, pointer: str) -> Decimal:
        return self._typed_pointer(pointer, typed.as_decimal)

    def get_document(self, key: str) -> 'Document':
        return Document.from_map(self._typed_key(key, typed.as_mapping))

    def get_document_at(self, pointer: str) -> 'Document':
        return Document.from_map(self._typed_pointer(pointer, typed.as_mapping))

    def get_iterable(self, key: str) -> List[Any]:
        return self._typed_key(key, typed.as_array)

    def get_iterable_at(self, pointer: str) -> List[Any]:
        return self._typed_pointer(pointer, typed.as_array)

    # --- merge patch and schema -----------------------------------------

    def apply_merge_patch(self, patch: Any) -> None:
        """Apply an RFC 7396 merge patch, replacing ``data`` with the result."""
        patched = codecs.apply_merge_patch(self.data, _unwrap(Document.normalize(patch)))
        self.data = _require_object(patched, "merge patch")

    def apply_merge_patch_bytes(self, patch: bytes) -> None:
        self.apply_merge_patch(Document.from_bytes(patch))

    def create_merge_patch(self, changed: Any) -> 'Document':
        """Return the merge patch that turns this document into ``changed``."""
        patch = codecs.create_merge_patch(self.data, Document.normalize(changed).data)
        return Document(_require_object(patch, "merge patch"))

    def schema_violations(self, schema: SchemaLike) -> List[SchemaViolation]:
        if isinstance(schema, (bytes, str)):
            schema = _require_object(codecs.decode_json(schema), "JSON Schema")
        return codecs.schema_violations(self.to_plain(), dict(schema))

    def validate_schema(self, schema: SchemaLike) -> None:
        violations = self.schema_violations(schema)
        if violations:
            logger.debug("document failed schema validation with %d violation(s)", len(violations))
            raise SchemaValidationError(violations)


def normalize(value: Any) -> Document:
    return Document.normalize(value)

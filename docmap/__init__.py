"""Nested document model with JSONPointer navigation and tabular export.

The Gradio UI lives in `app.py`. This package contains the library that:
- wraps decoded JSON/YAML objects as `Document`s
- reads, writes and deletes values by JSONPointer, with typed extraction
- collects dotted leaf keys
- projects a list of documents onto a delimited table
"""
from .document import Document, normalize
from .errors import (
    DecodeError,
    DocumentError,
    DocumentPanic,
    EmptyInput,
    IndexOutOfRange,
    KeyNotFound,
    MalformedPath,
    MissingKey,
    NotContainer,
    NotIterable,
    PathNotFound,
    SchemaValidationError,
    SchemaViolation,
    SerializationError,
    TypeMismatch,
    UnexpectedKey,
    UnsupportedType,
    ValueParseError,
)
from .flattening import project_rows, to_csv
from .must import must
from .records import to_iterable
from .schema_utils import collect_keys

__all__ = [
    'DecodeError',
    'Document',
    'DocumentError',
    'DocumentPanic',
    'EmptyInput',
    'IndexOutOfRange',
    'KeyNotFound',
    'MalformedPath',
    'MissingKey',
    'NotContainer',
    'NotIterable',
    'PathNotFound',
    'SchemaValidationError',
    'SchemaViolation',
    'SerializationError',
    'TypeMismatch',
    'UnexpectedKey',
    'UnsupportedType',
    'ValueParseError',
    'collect_keys',
    'must',
    'normalize',
    'project_rows',
    'to_csv',
    'to_iterable',
]

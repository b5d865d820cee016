from __future__ import annotations

from typing import Any, List, NamedTuple, Optional


class DocumentError(Exception):
    """Base class for every recoverable docmap failure."""


class MalformedPath(DocumentError):
    def __init__(self, pointer: str, reason: str):
        self.pointer = pointer
        self.reason = reason
        super().__init__(f"malformed JSONPointer: {pointer!r}: {reason}")


class PathNotFound(DocumentError):
    """Nothing lives at the addressed location."""

    def __init__(self, pointer: str, segment: str, message: str):
        self.pointer = pointer
        self.segment = segment
        super().__init__(f"JSONPointer: {pointer}: {message}")


class MissingKey(PathNotFound):
    def __init__(self, pointer: str, segment: str):
        super().__init__(pointer, segment, f"object has no key: {segment}")


class IndexOutOfRange(PathNotFound):
    def __init__(self, pointer: str, segment: str, length: int):
        self.length = length
        super().__init__(pointer, segment, f"array index: {segment} out of bounds [0,{length})")


class NotContainer(DocumentError):
    def __init__(self, pointer: str, segment: str, actual: str):
        self.pointer = pointer
        self.segment = segment
        self.actual = actual
        super().__init__(f"JSONPointer: {pointer}: cannot descend into {actual} at segment: {segment}")


class KeyNotFound(DocumentError):
    def __init__(self, key: str, snapshot: str):
        self.key = key
        self.snapshot = snapshot
        super().__init__(f"key: {key} does not exist in object: {snapshot}")


class TypeMismatch(DocumentError):
    """A value exists but is not of the requested type.

    ``path`` is either a top-level key or a JSONPointer; ``by_pointer`` tells
    which, so the message names it the way the caller addressed it.
    """

    def __init__(self, path: str, expected: str, actual: str, snapshot: str, by_pointer: bool = False):
        self.path = path
        self.expected = expected
        self.actual = actual
        self.snapshot = snapshot
        self.by_pointer = by_pointer
        super().__init__(self._format())

    def _format(self) -> str:
        label = "JSONPointer" if self.by_pointer else "key"
        return f"{label}: {self.path} is not of type: {self.expected} in object: {self.snapshot}, but: {self.actual}"


class ValueParseError(TypeMismatch):
    """A string field holds text that does not parse as the requested type."""

    def __init__(self, path: str, expected: str, raw: str, snapshot: str, by_pointer: bool = False):
        self.raw = raw
        super().__init__(path, expected, "str", snapshot, by_pointer)

    def _format(self) -> str:
        label = "JSONPointer" if self.by_pointer else "key"
        return f"{label}: {self.path} value: {self.raw!r} cannot be parsed as: {self.expected} in object: {self.snapshot}"


class NotIterable(DocumentError):
    def __init__(self, actual: str):
        self.actual = actual
        super().__init__(f"value of type: {actual} is not iterable")


class UnsupportedType(DocumentError):
    def __init__(self, actual: str, detail: Optional[str] = None):
        self.actual = actual
        message = f"unable to create Document from value, type is: {actual}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DecodeError(DocumentError):
    def __init__(self, codec: str, cause: Exception):
        self.codec = codec
        super().__init__(f"{codec} decoding failed: {cause}")


class SerializationError(DocumentError):
    def __init__(self, cause: Exception):
        super().__init__(f"document is not JSON serializable: {cause}")


class UnexpectedKey(DocumentError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"unexpected key: {key}, not found in header")


class EmptyInput(DocumentError):
    def __init__(self, what: str = "documents"):
        super().__init__(f"no {what} given, at least one is required")


class SchemaViolation(NamedTuple):
    value: Any
    property_path: str
    rule_path: str
    message: str

    def __str__(self) -> str:
        return (
            f"InvalidValue: {self.value!r}, PropertyPath: {self.property_path}, "
            f"RulePath: {self.rule_path}, Message: {self.message}"
        )


class SchemaValidationError(DocumentError):
    def __init__(self, violations: List[SchemaViolation]):
        self.violations = list(violations)
        super().__init__("\n".join(str(v) for v in self.violations))


class DocumentPanic(RuntimeError):
    """Raised by the ``must`` proxy; wraps the ``DocumentError`` that caused it.

    Not a ``DocumentError`` subclass: handlers for recoverable failures must
    not catch it.
    """

    def __init__(self, operation: str, cause: DocumentError):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}() failed: {cause}")

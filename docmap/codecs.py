"""Narrow wrappers around the external codecs the document model relies on.

- JSON: stdlib ``json``, canonical form (sorted keys, compact separators).
- YAML: PyYAML safe loader/dumper.
- Merge patch (RFC 7396): ``json-merge-patch``.
- JSON Schema: ``jsonschema``.
- Digest: BLAKE2b-256 of the canonical JSON bytes.
"""
from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List

import json_merge_patch
import yaml
from jsonschema import exceptions as jsonschema_exceptions
from jsonschema import validators

from .errors import DecodeError, SchemaViolation, SerializationError
from .paths import join_pointer


def _encode_default(value: Any) -> Any:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json(value: Any) -> bytes:
    try:
        text = json.dumps(
            value,
            sort_keys=True,
            separators=(',', ':'),
            ensure_ascii=False,
            allow_nan=False,
            default=_encode_default,
        )
    except (TypeError, ValueError) as exc:
        raise SerializationError(exc) from exc
    return text.encode('utf-8')


def decode_json(data: bytes) -> Any:
    if isinstance(data, str):
        data = data.encode('utf-8')
    try:
        return json.loads(data)
    except (ValueError, UnicodeDecodeError) as exc:
        raise DecodeError("JSON", exc) from exc


def jsonify(value: Any) -> Any:
    """Turn YAML-decoded structures into JSON-shaped ones (string keys only)."""
    if isinstance(value, Mapping):
        return {str(k): jsonify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [jsonify(v) for v in value]
    return value


def decode_yaml(data: bytes) -> Any:
    try:
        return jsonify(yaml.safe_load(data))
    except yaml.YAMLError as exc:
        raise DecodeError("YAML", exc) from exc


def encode_yaml(value: Any) -> bytes:
    # Round trip through JSON so nested Documents and dates become plain data.
    plain = decode_json(encode_json(value))
    try:
        return yaml.safe_dump(plain, allow_unicode=True, sort_keys=True).encode('utf-8')
    except yaml.YAMLError as exc:
        raise SerializationError(exc) from exc


def digest(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def apply_merge_patch(original: Dict[str, Any], patch: Any) -> Any:
    """Apply an RFC 7396 merge patch; neither argument is modified."""
    target = decode_json(encode_json(original))
    return json_merge_patch.merge(target, decode_json(encode_json(patch)))


def create_merge_patch(original: Dict[str, Any], changed: Dict[str, Any]) -> Any:
    return json_merge_patch.create_patch(
        decode_json(encode_json(original)),
        decode_json(encode_json(changed)),
    )


def schema_violations(instance: Any, schema: Dict[str, Any]) -> List[SchemaViolation]:
    """Validate ``instance`` and return every violation, shallowest first."""
    try:
        cls = validators.validator_for(schema)
        cls.check_schema(schema)
    except jsonschema_exceptions.SchemaError as exc:
        raise DecodeError("JSON Schema", exc) from exc

    validator = cls(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: (len(e.absolute_path), list(map(str, e.absolute_path))))
    return [
        SchemaViolation(
            value=err.instance,
            property_path=join_pointer(str(p) for p in err.absolute_path),
            rule_path=join_pointer(str(p) for p in err.absolute_schema_path),
            message=err.message,
        )
        for err in errors
    ]

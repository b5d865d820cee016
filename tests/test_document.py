from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
import yaml

from docmap import to_csv
from docmap.document import Document, normalize
from docmap.errors import (
    DecodeError,
    DocumentError,
    DocumentPanic,
    KeyNotFound,
    MalformedPath,
    MissingKey,
    NotContainer,
    NotIterable,
    PathNotFound,
    SchemaValidationError,
    SerializationError,
    TypeMismatch,
    UnsupportedType,
    ValueParseError,
)
from docmap.must import must
from docmap.records import to_iterable


# --- construction ---------------------------------------------------------


def test_from_bytes_decodes_an_object() -> None:
    doc = Document.from_bytes(b'{"a": {"b": [1, 2]}}')
    assert doc.data == {"a": {"b": [1, 2]}}


@pytest.mark.parametrize("raw", [b"[1, 2]", b"not json", b'"text"'])
def test_from_bytes_rejects_non_objects(raw: bytes) -> None:
    with pytest.raises(DecodeError):
        Document.from_bytes(raw)


def test_from_map_aliases_the_given_dict() -> None:
    backing = {"k": "v"}
    doc = Document.from_map(backing)
    doc.set_at("/k", "changed")
    assert backing["k"] == "changed"


def test_normalize_accepts_documents_dicts_and_bytes() -> None:
    doc = Document({"a": 1})
    assert normalize(doc) is doc
    assert normalize({"a": 1}) == {"a": 1}
    assert normalize(b'{"a": 1}') == {"a": 1}


@pytest.mark.parametrize("value", [42, "text", [{"a": 1}], None])
def test_normalize_rejects_other_shapes(value) -> None:
    with pytest.raises(UnsupportedType):
        normalize(value)


def test_to_iterable_accepts_arrays_only() -> None:
    assert to_iterable([1, 2]) == [1, 2]
    assert to_iterable(({"a": 1}, {"b": 2})) == [{"a": 1}, {"b": 2}]
    with pytest.raises(NotIterable):
        to_iterable("abc")
    with pytest.raises(NotIterable):
        to_iterable({"a": 1})


def test_from_string_list_has_set_semantics() -> None:
    doc = Document.from_string_list(["a", "b", "a"])
    assert sorted(doc.keys_list()) == ["a", "b"]
    assert "a" in doc


def test_from_list_rejects_non_string_entries() -> None:
    assert sorted(Document.from_list(["x", "y"])) == ["x", "y"]
    with pytest.raises(UnsupportedType) as exc:
        Document.from_list(["x", 3])
    assert "index: 1" in str(exc.value)


def test_from_stream_reads_binary_and_text() -> None:
    assert Document.from_stream(io.BytesIO(b'{"a": 1}')) == {"a": 1}
    assert Document.from_stream(io.StringIO('{"b": 2}')) == {"b": 2}


def test_yaml_keys_are_stringified() -> None:
    doc = Document.from_yaml_bytes(b"a: 1\n2:\n  - x\n  - 3: y\n")
    assert doc.data == {"a": 1, "2": ["x", {"3": "y"}]}


def test_empty_yaml_is_an_empty_document() -> None:
    assert Document.from_yaml_bytes(b"").is_empty()


def test_yaml_list_is_not_a_document() -> None:
    with pytest.raises(DecodeError):
        Document.from_yaml_bytes(b"- a\n- b\n")


def test_from_yaml_file(tmp_path: Path) -> None:
    path = tmp_path / "doc.yaml"
    path.write_text("outer:\n  inner: value\n", encoding="utf-8")
    assert Document.from_yaml_file(str(path)).get_string_at("/outer/inner") == "value"


def test_from_yaml_file_missing_is_a_decode_error(tmp_path: Path) -> None:
    missing = str(tmp_path / "absent.yaml")
    with pytest.raises(DecodeError) as exc:
        Document.from_yaml_file(missing)
    assert isinstance(exc.value.__cause__, FileNotFoundError)
    with pytest.raises(DocumentPanic):
        Document.must.from_yaml_file(missing)


class _BrokenStream:
    def read(self) -> bytes:
        raise OSError("device gone")


def test_from_stream_read_failure_is_a_decode_error() -> None:
    with pytest.raises(DecodeError):
        Document.from_stream(_BrokenStream())


def test_from_yaml_map() -> None:
    assert Document.from_yaml_map({1: {True: "x"}}).data == {"1": {"True": "x"}}


# --- serialization ------------------------------------------------------------


def test_bytes_are_canonical() -> None:
    first = Document({"b": 1, "a": {"d": 2, "c": 3}})
    second = Document({"a": {"c": 3, "d": 2}, "b": 1})
    assert first.to_bytes() == b'{"a":{"c":3,"d":2},"b":1}'
    assert first.digest() == second.digest()
    assert len(first.digest()) == 32


def test_nested_document_serializes_as_plain_object() -> None:
    doc = Document({"nested": Document({"value": "foobar"})})
    assert doc.to_plain() == {"nested": {"value": "foobar"}}


def test_wrapped_result_bytes() -> None:
    assert Document({"a": 1}).wrapped_result_bytes() == b'{"result":{"a":1}}'


def test_yaml_round_trip(nested_doc: Document) -> None:
    assert yaml.safe_load(nested_doc.to_yaml_bytes()) == nested_doc.to_plain()


def test_copy_is_independent(nested_doc: Document) -> None:
    clone = nested_doc.copy()
    assert clone == nested_doc
    clone.set_at("/owner/address/city", "Praha")
    clone.get_iterable("tags").append("c")
    assert nested_doc.get_string_at("/owner/address/city") == "Brno"
    assert nested_doc.get_iterable("tags") == ["a", "b"]


def test_copy_reduces_foreign_values() -> None:
    stamp = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    clone = Document({"when": stamp, "amount": Decimal("1.10")}).copy()
    assert clone.data == {"when": "2020-01-02T03:04:05+00:00", "amount": "1.10"}


# --- navigation -----------------------------------------------------------


def test_exists_at(nested_doc: Document) -> None:
    assert nested_doc.exists_at("/owner/address/city")
    assert not nested_doc.exists_at("/owner/phone")
    with pytest.raises(NotContainer):
        nested_doc.exists_at("/name/first")


def test_exists_at_on_schema_document() -> None:
    doc = Document.from_bytes(
        b'{"properties":{"roles":{"items":{"type":"string"},"type":"array"}},"required":["roles"]}'
    )
    assert doc.exists_at("/properties/roles/items/type")


def test_absent_pointer_is_not_found(nested_doc: Document) -> None:
    with pytest.raises(PathNotFound):
        nested_doc.get_at("/owner/phone")


def test_set_at_then_get_at(nested_doc: Document) -> None:
    nested_doc.set_at("/owner/address/zip", "60200")
    assert nested_doc.get_at("/owner/address/zip") == "60200"


def test_set_at_recursive_on_empty_document() -> None:
    doc = Document.empty()
    doc.set_at_recursive("/a/b/c", "x")
    assert doc.get_document_at("/a").keys_list() == ["b"]
    assert doc.get_document_at("/a/b").data == {"c": "x"}
    assert doc.get_string_at("/a/b/c") == "x"


def test_set_at_stores_the_backing_dict_of_a_document() -> None:
    child = Document({"k": 1})
    doc = Document.empty()
    doc.set_at("/child", child)
    assert type(doc.data["child"]) is dict
    child.set_at("/k", 2)
    assert doc.get_int_at("/child/k") == 2


def test_delete_at(nested_doc: Document) -> None:
    nested_doc.delete_at("/owner/address")
    assert nested_doc.get_at("/owner") == {"id": 7}
    with pytest.raises(MissingKey):
        nested_doc.delete_at("/owner/address")
    with pytest.raises(MalformedPath):
        nested_doc.delete_at("")


def test_get_document_is_a_view(nested_doc: Document) -> None:
    owner = nested_doc.get_document("owner")
    owner.set_at("/id", 8)
    assert nested_doc.get_int_at("/owner/id") == 8


def test_get_key_missing(nested_doc: Document) -> None:
    with pytest.raises(KeyNotFound) as exc:
        nested_doc.get_key("missing")
    assert exc.value.key == "missing"
    assert '"name":"widget"' in str(exc.value)


def test_inject_creates_target_and_overwrites(nested_doc: Document) -> None:
    nested_doc.inject("/extra", {"a": 1, "b/c": 2})
    assert nested_doc.get_at("/extra") == {"a": 1, "b/c": 2}
    nested_doc.inject("/extra", Document({"a": 3}))
    assert nested_doc.get_at("/extra") == {"a": 3, "b/c": 2}


# --- typed access ---------------------------------------------------------


def test_typed_getters(nested_doc: Document) -> None:
    assert nested_doc.get_string("name") == "widget"
    assert nested_doc.get_bool("enabled") is True
    assert nested_doc.get_int("count") == 42
    assert nested_doc.get_int_at("/owner/id") == 7
    assert nested_doc.get_float("count") == 42.0
    assert nested_doc.get_float_at("/owner/id") == 7.0
    assert nested_doc.get_decimal("price") == Decimal("12.50")
    assert nested_doc.get_iterable("tags") == ["a", "b"]
    assert nested_doc.get_document_at("/owner/address") == {"city": "Brno"}


def test_get_time_parses_rfc3339(nested_doc: Document) -> None:
    parsed = nested_doc.get_time("created")
    assert parsed == datetime(2019, 11, 20, 10, 0, tzinfo=timezone.utc)
    doc = Document({"t": "2019-11-20T10:00:00+02:00"})
    assert doc.get_time_at("/t").utcoffset() == timedelta(hours=2)


@pytest.mark.parametrize(
    "raw",
    [
        "2019-11-20",
        "2019-11-20T10:00:00",
        "yesterday",
        "2019-W47-3T10:00:00+00:00",
        "20191120T100000Z",
        "2019-11-20T10:00+00:00",
        "2019-11-20T10Z",
    ],
)
def test_get_time_rejects_non_rfc3339(raw: str) -> None:
    with pytest.raises(ValueParseError):
        Document({"t": raw}).get_time("t")


def test_get_int_from_float_and_not_from_string() -> None:
    doc = Document({"f": 42.0, "s": "42", "b": True})
    assert doc.get_int("f") == 42
    with pytest.raises(TypeMismatch) as exc:
        doc.get_int("s")
    assert type(exc.value) is TypeMismatch
    assert exc.value.expected == "INT or FLOAT64"
    assert exc.value.actual == "str"
    with pytest.raises(TypeMismatch):
        doc.get_int("b")


def test_type_mismatch_message_for_key() -> None:
    doc = Document({"k": 1})
    with pytest.raises(TypeMismatch) as exc:
        doc.get_string("k")
    assert str(exc.value) == 'key: k is not of type: STRING in object: {"k":1}, but: int'


def test_type_mismatch_message_for_pointer(nested_doc: Document) -> None:
    with pytest.raises(TypeMismatch) as exc:
        nested_doc.get_iterable_at("/owner")
    assert str(exc.value).startswith("JSONPointer: /owner is not of type: ARRAY in object: {")
    assert str(exc.value).endswith("but: dict")
    assert exc.value.by_pointer


def test_get_decimal_rejects_garbage_and_numbers() -> None:
    doc = Document({"bad": "twelve", "num": 12.5})
    with pytest.raises(ValueParseError):
        doc.get_decimal("bad")
    with pytest.raises(TypeMismatch):
        doc.get_decimal("num")


@pytest.mark.parametrize("raw", ["1_000", " 12.5 ", "NaN", "Infinity", "1e"])
def test_get_decimal_rejects_non_decimal_text(raw: str) -> None:
    with pytest.raises(ValueParseError):
        Document({"d": raw}).get_decimal("d")


def test_get_decimal_accepts_plain_and_exponent_forms() -> None:
    doc = Document({"a": "-12.50", "b": ".5", "c": "1E3"})
    assert doc.get_decimal("a") == Decimal("-12.50")
    assert doc.get_decimal("b") == Decimal("0.5")
    assert doc.get_decimal("c") == Decimal(1000)


def test_get_time_accepts_lowercase_separators() -> None:
    doc = Document({"t": "2019-11-20t10:00:00.250z"})
    assert doc.get_time("t") == datetime(2019, 11, 20, 10, 0, 0, 250000, tzinfo=timezone.utc)


def test_non_finite_floats_do_not_serialize() -> None:
    with pytest.raises(SerializationError):
        Document({"x": float("nan")}).to_bytes()
    with pytest.raises(SerializationError):
        Document({"x": float("inf")}).to_bytes()


# --- must variants --------------------------------------------------------


def test_must_returns_the_same_value(nested_doc: Document) -> None:
    assert nested_doc.must.get_string("name") == "widget"
    assert Document.must.from_bytes(b'{"a":1}') == {"a": 1}


def test_must_turns_failures_into_panics(nested_doc: Document) -> None:
    with pytest.raises(DocumentPanic) as exc:
        nested_doc.must.get_string("count")
    assert not isinstance(exc.value, DocumentError)
    assert isinstance(exc.value.cause, TypeMismatch)
    with pytest.raises(DocumentPanic):
        Document.must.from_bytes(b"[")
    with pytest.raises(DocumentPanic):
        must(to_csv)([], ",")


# --- merge patch and schema ----------------------------------------------


def test_create_merge_patch() -> None:
    original = Document({"existing": "value"})
    changed = Document({"new": "value"})
    patch = original.create_merge_patch(changed)
    assert patch.to_bytes() == b'{"existing":null,"new":"value"}'


def test_apply_merge_patch() -> None:
    doc = Document({"a": 1, "b": {"c": 2, "keep": True}})
    doc.apply_merge_patch({"b": {"c": None, "d": 3}, "e": [1]})
    assert doc.data == {"a": 1, "b": {"keep": True, "d": 3}, "e": [1]}


def test_apply_merge_patch_bytes() -> None:
    doc = Document({"a": 1})
    doc.apply_merge_patch_bytes(b'{"a": null, "b": 2}')
    assert doc.data == {"b": 2}


def test_schema_violations(nested_doc: Document) -> None:
    schema = {
        "type": "object",
        "properties": {"count": {"type": "string"}},
        "required": ["name", "missing"],
    }
    violations = nested_doc.schema_violations(schema)
    assert {v.property_path for v in violations} == {"", "/count"}
    assert violations[0].property_path == ""
    assert "missing" in violations[0].message


def test_validate_schema_raises_with_all_violations(nested_doc: Document) -> None:
    schema = b'{"type": "object", "properties": {"owner": {"properties": {"id": {"type": "string"}}}}}'
    with pytest.raises(SchemaValidationError) as exc:
        nested_doc.validate_schema(schema)
    assert len(exc.value.violations) == 1
    assert "PropertyPath: /owner/id" in str(exc.value)


def test_validate_schema_passes(nested_doc: Document) -> None:
    nested_doc.validate_schema({"type": "object", "required": ["name"]})

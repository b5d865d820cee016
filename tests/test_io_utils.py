from __future__ import annotations

import io
from pathlib import Path

import pytest

from docmap.errors import DecodeError, PathNotFound, UnsupportedType
from docmap.io_utils import documents_at, read_content


def test_read_content_from_path(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    path.write_text('[{"a": 1}]', encoding="utf-8")
    assert read_content(str(path)) == [{"a": 1}]
    assert read_content(path) == [{"a": 1}]


def test_read_content_picks_yaml_by_extension(tmp_path: Path) -> None:
    path = tmp_path / "data.yml"
    path.write_text("items:\n  - a: 1\n", encoding="utf-8")
    assert read_content(str(path)) == {"items": [{"a": 1}]}


def test_read_content_from_stream() -> None:
    stream = io.BytesIO(b'{"a": 1}')
    stream.read()
    assert read_content(stream) == {"a": 1}


def test_read_content_without_file() -> None:
    with pytest.raises(ValueError):
        read_content(None)


def test_read_content_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(DecodeError):
        read_content(str(path))


def test_documents_at_root_list() -> None:
    docs = documents_at([{"a": 1}, {"a": 2}])
    assert [d.get_int("a") for d in docs] == [1, 2]


def test_documents_at_pointer() -> None:
    data = {"result": {"items": [{"a": 1}, {"a": 2}, {"a": 3}]}}
    assert len(documents_at(data, "/result/items")) == 3


def test_documents_at_single_object() -> None:
    docs = documents_at({"a": 1})
    assert len(docs) == 1
    assert docs[0].data == {"a": 1}


def test_documents_at_pointer_into_root_list() -> None:
    data = [{"children": [{"x": 1}, {"x": 2}]}]
    assert len(documents_at(data, "/0/children")) == 2


def test_documents_at_missing_pointer() -> None:
    with pytest.raises(PathNotFound):
        documents_at({"a": 1}, "/items")


def test_documents_at_rejects_scalars_in_collection() -> None:
    with pytest.raises(UnsupportedType):
        documents_at({"items": [1, 2]}, "/items")

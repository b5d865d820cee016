from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from docmap.config import get_settings
from docmap.document import Document


@pytest.fixture
def nested_doc() -> Document:
    return Document.from_map({
        "name": "widget",
        "count": 42.0,
        "enabled": True,
        "tags": ["a", "b"],
        "created": "2019-11-20T10:00:00Z",
        "price": "12.50",
        "owner": {
            "id": 7,
            "address": {"city": "Brno"},
        },
    })


@pytest.fixture
def settings_env(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("DOCMAP_EXPORT_DIR", str(tmp_path))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()

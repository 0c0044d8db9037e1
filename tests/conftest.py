"""
Pytest configuration: ensure project root is on sys.path for imports.

The tests import the local `gitemoji` package directly. When running tests
from certain IDEs or subdirectories, the repository root might not be on the
Python module search path. This hook prepends the repo root so imports work
consistently (e.g., `from gitemoji.models import ...`).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest


def _add_repo_root_to_sys_path() -> None:
    # tests/ -> repo root
    root = Path(__file__).resolve().parents[1]
    root_str = str(root)
    if root_str not in sys.path:
        sys.path.insert(0, root_str)


_add_repo_root_to_sys_path()

from gitemoji.storage import parse_dataset  # noqa: E402


ROCKET_DATA = {
    "emoji": {
        "rocket": {"id": "rocket", "s": "🚀"},
        "bug": {"id": "bug", "s": "🐛"},
        "memo": {"id": "memo", "s": "📝"},
    },
    "context": {
        "v1": [
            {"keyword": ["launch"], "emoji": ["rocket"]},
            {"keyword": ["fix", "Bug "], "emoji": ["bug"]},
        ],
        "v2": [
            {"keyword": ["launch"], "emoji": ["rocket"]},
            {"keyword": ["fix", "Bug "], "emoji": ["bug"]},
        ],
    },
    "word": {
        "launch": {"cover": ["blastoff"]},
        "docs": {"cover": ["doc"], "tag": ["abbreviation"]},
    },
}


@pytest.fixture
def rocket_data():
    return json.loads(json.dumps(ROCKET_DATA))


@pytest.fixture
def rocket_dataset(rocket_data):
    return parse_dataset(rocket_data)


@pytest.fixture
def dataset_file(tmp_path, rocket_data):
    path = tmp_path / "dataset.json"
    path.write_text(json.dumps(rocket_data, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _isolated_runtime_config(tmp_path, monkeypatch):
    monkeypatch.setenv("GITEMOJI_RUNTIME_CONFIG", str(tmp_path / "config.runtime.ini"))
    monkeypatch.delenv("GITEMOJI_CONTEXTUAL_DATA_VERSION", raising=False)
    monkeypatch.delenv("GITEMOJI_DATASET", raising=False)

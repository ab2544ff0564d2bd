from __future__ import annotations

import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from keymap_builder import registry  # noqa: E402


@pytest.fixture(autouse=True)
def reset_registry_cache():
    registry._CACHED_TABLE = None  # type: ignore[attr-defined]
    yield
    registry._CACHED_TABLE = None  # type: ignore[attr-defined]

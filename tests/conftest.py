from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


import pytest

from linewrap.cancellation import CancellationToken, cancellation_scope
from linewrap.wrapping.history import default_history_store
from tests.env_helpers import env_scope as _env_scope


@pytest.fixture(autouse=True)
def _cancellation_scope_fixture():
    default_history_store().clear()
    with cancellation_scope(CancellationToken.from_timeout_ms(120_000)):
        yield
    default_history_store().clear()


@pytest.fixture
def env_scope():
    return _env_scope


@pytest.fixture
def write_source(tmp_path: Path):
    def _write(text: str, name: str = "sample.py") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write

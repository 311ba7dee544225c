# tests/conftest.py
from __future__ import annotations

import pytest

from addchain.cli import clear_history
from addchain.runtime import reset


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Private workspace and a clean runtime for every test."""
    monkeypatch.setenv("ADDCHAIN_HOME", str(tmp_path))
    reset()
    clear_history()
    yield tmp_path
    reset()

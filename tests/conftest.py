"""
Shared fixtures for docsettings tests
"""

from pathlib import Path
from typing import Callable

import pytest

from docsettings.config import appsettings


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], str]:
    """Write a text file under tmp_path and return its path as a string"""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def default_appsettings(monkeypatch):
    """Keep tests independent of DOCSETTINGS_* variables in the environment"""
    monkeypatch.setattr(appsettings, "data_dir", None)
    monkeypatch.setattr(appsettings, "strict_mode", False)
    monkeypatch.setattr(appsettings, "debug_mode", False)

"""Pytest configuration shared by every suite.

What:
  Put the in-repo source tree on ``sys.path`` and isolate each test from the
  operator's real Lobster environment.

Why:
  The runtime loader reads ``LOBSTER_STATE_DIR``, ``LOBSTER_CONFIG_PATH`` and
  ``~/.lobster``. Without isolation a developer's own snapshots or config file
  would leak into assertions, or worse, be overwritten by tests.

How:
  Prepend ``lobster/src`` to ``sys.path`` at import time and use an autouse
  fixture that clears the Lobster variables and points ``HOME`` at a
  temporary directory.

Interfaces:
  :func:`isolated_environment` (autouse fixture).
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "lobster" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Point ``HOME`` at a scratch directory and drop Lobster variables."""

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in ("LOBSTER_STATE_DIR", "LOBSTER_CONFIG_PATH", "LOBSTER_LOG_LEVEL", "GOG_ACCOUNT"):
        monkeypatch.delenv(name, raising=False)
    yield home

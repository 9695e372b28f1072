"""Pytest fixtures for unit tests.

What:
  Make ``tests/unit`` importable (for :mod:`fakes`) and expose a snapshot
  store rooted in a temporary directory plus a scripted process runner.

Invariants & Safety:
  - Every test receives a fresh, not-yet-created state directory so
    on-demand directory creation is exercised too.
"""

import sys
from pathlib import Path

import pytest

from lobster.state import SnapshotStore

UNIT_DIR = Path(__file__).resolve().parent
if str(UNIT_DIR) not in sys.path:
    sys.path.insert(0, str(UNIT_DIR))

from fakes import FakeRunner


@pytest.fixture
def state_root(tmp_path: Path) -> Path:
    return tmp_path / "state"


@pytest.fixture
def store(state_root: Path) -> SnapshotStore:
    return SnapshotStore(state_root)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()

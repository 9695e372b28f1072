"""Filesystem-backed snapshot store with change detection.

What:
  Persist the most recent snapshot for each key as ``<root>/<slot>.json`` and
  report whether a newly observed value differs from the stored one.

Why:
  Polling workflows (pull-request monitors, inbox triage) need idempotent
  "has this changed since last check?" answers without running a database.
  One human-readable JSON file per key keeps the state inspectable with
  ordinary tools.

How:
  :meth:`SnapshotStore.compare` follows a strict read-before-write sequence:
  normalise the key, load the prior record (absence means first observation),
  compare canonical encodings, ensure the root exists, then atomically replace
  the record by writing a temporary file in the same directory and renaming it
  over the target.

Interfaces:
  :class:`SnapshotStore`, :class:`ComparisonResult`, :func:`collapse_items`.

Invariants & Safety:
  - A missing record yields ``before=None`` and always counts as a change.
  - A corrupted record, including one holding NaN, Infinity or an
    out-of-range number, raises :class:`StorageError`; it is never treated
    as absent and is left untouched.
  - The record is rewritten on every comparison, even when unchanged.
  - No partially written record is ever visible under the final filename.
  - No locking is applied; callers guarantee a single writer per key.
"""
from __future__ import annotations

import json
import math
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from ..utils.logging import get_logger
from .canonical import canonical, pretty
from .errors import StorageError
from .keys import normalize_key


LOGGER = get_logger("lobster.state")

_RECORD_MODE = 0o644


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing a snapshot against the previously stored one."""

    key: str
    changed: bool
    before: Any
    after: Any

    def as_dict(self) -> Dict[str, Any]:
        return {
            "kind": "diff.last",
            "key": self.key,
            "changed": self.changed,
            "before": self.before,
            "after": self.after,
        }


def collapse_items(items: Iterable[Any]) -> Any:
    """Fold a finite item sequence into a single snapshot value.

    What:
      Returns the sole item when exactly one is supplied, otherwise a list of
      all items (including the empty list).

    Why:
      Existing callers store singleton results (a single PR view, one status
      document) as the bare object. Records written by those callers must keep
      comparing equal, so a one-element sequence is deliberately
      indistinguishable from its element.

    Args:
      items: Finite iterable of JSON-compatible items.

    Returns:
      The single item, or a list for zero or several items.
    """

    collected = list(items)
    if len(collected) == 1:
        return collected[0]
    return collected


class SnapshotStore:
    """Owns the per-key snapshot records stored under ``root_dir``.

    What:
      Resolves record paths, loads prior snapshots, and performs the
      compare-then-persist protocol.

    Why:
      Centralising record access guarantees that every workflow uses the same
      key normalisation, canonical comparison, and crash-safe overwrite.

    How:
      The root directory is injected at construction time (see
      :func:`lobster.config.load_runtime_config`) and created lazily on first
      write.
    """

    def __init__(self, root_dir: Path | str):
        self._root = Path(root_dir).expanduser()

    @property
    def root_dir(self) -> Path:
        return self._root

    def path_for(self, key: str) -> Path:
        """Return the record path for ``key``.

        Raises:
          InvalidKey: If ``key`` normalises to an empty slot name.
        """

        return self._root / f"{normalize_key(key)}.json"

    def load(self, key: str) -> Optional[Any]:
        """Return the stored snapshot for ``key`` or ``None`` when absent.

        Raises:
          InvalidKey: If ``key`` normalises to an empty slot name.
          StorageError: If the record exists but cannot be read or parsed.
        """

        return self._read(self.path_for(key))

    def compare(self, key: str, after: Any) -> ComparisonResult:
        """Compare ``after`` against the stored snapshot and persist it.

        What:
          Reports whether ``after`` differs from the last snapshot recorded
          under ``key`` and makes ``after`` the new record.

        Why:
          Reading before writing guarantees the caller always diffs against
          the immediately prior observation, even though the record is
          overwritten unconditionally.

        How:
          Normalise the key, read the prior record, compare canonical
          encodings (which also validates ``after`` before anything touches
          disk), create the root directory, then replace the record atomically.

        Args:
          key: Caller-chosen logical identifier.
          after: JSON-compatible snapshot of the current state.

        Returns:
          :class:`ComparisonResult` carrying the original ``key``.

        Raises:
          InvalidKey: If ``key`` normalises to an empty slot name.
          StorageError: On corrupted records or filesystem failures.
          SnapshotEncodingError: If ``after`` is not JSON-serialisable.
        """

        path = self.path_for(key)
        before = self._read(path)
        changed = canonical(before) != canonical(after)
        self._write(path, pretty(after))
        LOGGER.debug("snapshot_compared", key=key, record=path.name, changed=changed)
        return ComparisonResult(key=key, changed=changed, before=before, after=after)

    def compare_items(self, key: str, items: Iterable[Any]) -> ComparisonResult:
        """Collapse ``items`` with :func:`collapse_items` and :meth:`compare` them."""

        return self.compare(key, collapse_items(items))

    def _read(self, path: Path) -> Optional[Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.error("snapshot_read_failed", record=str(path), error=str(exc))
            raise StorageError(f"Unable to read snapshot record {path}: {exc}") from exc
        try:
            return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)
        except ValueError as exc:
            LOGGER.error("snapshot_corrupted", record=str(path), error=str(exc))
            raise StorageError(f"Corrupted snapshot record {path}: {exc}") from exc

    def _write(self, path: Path, text: str) -> None:
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(f"Unable to create state directory {self._root}: {exc}") from exc

        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=self._root)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            # mkstemp creates the file with mode 0600.
            os.chmod(tmp_name, _RECORD_MODE)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass
            LOGGER.error("snapshot_write_failed", record=str(path), error=str(exc))
            raise StorageError(f"Unable to write snapshot record {path}: {exc}") from exc

"""Deterministic JSON encodings used for snapshot comparison and storage.

What:
  Provide the canonical "stable stringify" form used to decide whether two
  snapshots are equal, and the pretty-printed form written to record files.

Why:
  Change detection must not flag a snapshot as modified merely because an
  upstream tool emitted mapping keys in a different order. Record files, on
  the other hand, are read by humans and other tooling, so they keep the
  caller's key order and a readable layout.

How:
  :func:`canonical` delegates to :func:`json.dumps` with ``sort_keys`` and
  compact separators; :func:`pretty` uses two-space indentation and a trailing
  newline. Both reject ``NaN``/``Infinity`` so records stay standard JSON.

Interfaces:
  :func:`canonical`, :func:`pretty`, :func:`snapshots_equal`.

Invariants & Safety:
  - Mapping keys are sorted at every nesting level; list order is preserved.
  - Scalars keep their literal representation, so ``1`` and ``1.0`` differ,
    as do ``"A"`` and ``"a"``.
  - Unserialisable values raise :class:`SnapshotEncodingError` before any
    record is written.
"""
from __future__ import annotations

import json
from typing import Any

from .errors import SnapshotEncodingError


def canonical(value: Any) -> str:
    """Serialise ``value`` with sorted mapping keys for equality checks.

    Args:
      value: JSON-compatible snapshot (``None`` is encoded as ``null``).

    Returns:
      Compact JSON text whose bytes are identical for structurally equal
      values regardless of mapping insertion order.

    Raises:
      SnapshotEncodingError: If ``value`` contains non-JSON types, non-string
        mapping keys of mixed types, or non-finite floats.
    """

    try:
        return json.dumps(
            value,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as exc:
        raise SnapshotEncodingError(f"snapshot is not JSON-serializable: {exc}") from exc


def pretty(value: Any) -> str:
    """Return the human-diffable record representation of ``value``."""

    try:
        text = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise SnapshotEncodingError(f"snapshot is not JSON-serializable: {exc}") from exc
    return text + "\n"


def snapshots_equal(left: Any, right: Any) -> bool:
    return canonical(left) == canonical(right)

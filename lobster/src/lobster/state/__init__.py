"""Snapshot persistence and change detection.

What:
  Expose the key codec, canonical encoders, snapshot store, and error types
  that make up Lobster's "has this changed since last check?" primitive.

Interfaces:
  - normalize_key: Map caller keys to filesystem-safe slot names.
  - canonical / pretty: Comparison and storage encodings.
  - SnapshotStore / ComparisonResult / collapse_items: Compare-and-persist API.
  - StateError / InvalidKey / StorageError / SnapshotEncodingError.
"""

from .canonical import canonical, pretty, snapshots_equal
from .errors import InvalidKey, SnapshotEncodingError, StateError, StorageError
from .keys import normalize_key
from .store import ComparisonResult, SnapshotStore, collapse_items

__all__ = [
    "normalize_key",
    "canonical",
    "pretty",
    "snapshots_equal",
    "SnapshotStore",
    "ComparisonResult",
    "collapse_items",
    "StateError",
    "InvalidKey",
    "StorageError",
    "SnapshotEncodingError",
]

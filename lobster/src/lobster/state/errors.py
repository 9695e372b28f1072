"""Exception hierarchy for the snapshot state store."""
from __future__ import annotations


class StateError(Exception):
    """Base error for snapshot persistence failures."""


class InvalidKey(StateError, ValueError):
    """Raised when a caller key is empty or normalizes to an empty slot name."""


class StorageError(StateError):
    """Raised when a snapshot record cannot be read, parsed, or written.

    The underlying ``OSError`` or decoding error is always chained as
    ``__cause__`` so operators can see the original failure.
    """


class SnapshotEncodingError(StateError, TypeError):
    """Raised when a snapshot value cannot be represented as standard JSON."""

"""Normalise caller-supplied keys into filesystem-safe snapshot slot names.

What:
  Convert arbitrary identifiers such as ``github.pr:owner/repo#42`` into the
  restricted ``[a-z0-9._-]`` alphabet used for record filenames.

Why:
  Workflows build keys from repository names, PR numbers, and search queries.
  Those strings routinely contain ``/``, ``:``, ``#`` and whitespace, none of
  which can appear verbatim in a portable filename. Normalising in one place
  keeps every caller pointing at the same slot for the same logical key.

How:
  Lower-case the input, replace each run of disallowed characters with a
  single underscore, collapse repeated underscores, and trim them from both
  ends.

Interfaces:
  :func:`normalize_key`.

Invariants & Safety:
  - The result is never empty; empty results raise :class:`InvalidKey`.
  - ``normalize_key(normalize_key(k)) == normalize_key(k)``.
  - Distinct keys can alias the same slot (``"A B"`` and ``"a_b"``). This is
    accepted and not corrected.
"""
from __future__ import annotations

import re

from .errors import InvalidKey

_DISALLOWED = re.compile(r"[^a-z0-9._-]+")
_REPEATED_SEPARATOR = re.compile(r"_+")


def normalize_key(key: str) -> str:
    """Return the storage slot identifier for ``key``.

    Args:
      key: Caller-chosen logical identifier.

    Returns:
      Lower-case identifier restricted to ``[a-z0-9._-]``.

    Raises:
      InvalidKey: If ``key`` is not a non-empty string or normalises to an
        empty string (e.g. ``"###"``).
    """

    if not isinstance(key, str) or not key:
        raise InvalidKey("snapshot key is empty/invalid")
    safe = _DISALLOWED.sub("_", key.lower())
    safe = _REPEATED_SEPARATOR.sub("_", safe).strip("_")
    if not safe:
        raise InvalidKey(f"snapshot key {key!r} normalizes to an empty name")
    return safe

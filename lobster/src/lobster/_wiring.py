"""Helper utilities bridging the CLI with runtime subsystems.

What:
  Provide the small pieces :mod:`lobster.cli` composes: decoding piped item
  streams, building the snapshot store and process runner from the runtime
  configuration, and emitting JSON results.

Why:
  Keeping these helpers out of the command bodies makes each command a short
  sequence of calls and lets tests exercise the stream decoding on its own.

How:
  ``read_items`` walks a text buffer with :meth:`json.JSONDecoder.raw_decode`
  so JSON Lines, concatenated documents, and a single array all work.
  ``build_store``/``build_runner`` translate :class:`RuntimeConfig` into
  concrete collaborators.

Interfaces:
  ``read_stream``, ``read_items``, ``build_store``, ``build_runner``, ``emit``.

Invariants & Safety:
  - A single top-level JSON array on stdin is treated as the item sequence
    itself, so ``[a, b]`` and ``a\\nb`` snapshot identically.
  - ``emit`` always writes exactly one JSON document to stdout.
"""
from __future__ import annotations

import json
from typing import Any, TextIO

import typer

from .config import RuntimeConfig
from .state import SnapshotStore
from .utils.process import SubprocessRunner
from .workflows import GH_INSTALL_HINT, GOG_INSTALL_HINT, WorkflowError


def read_items(text: str) -> list[Any]:
    """Decode a stream of JSON values into a list of items.

    Args:
      text: Raw stdin contents.

    Returns:
      The decoded items; empty input yields an empty list.

    Raises:
      WorkflowError: If the stream contains anything that is not JSON.
    """

    decoder = json.JSONDecoder()
    values: list[Any] = []
    index = 0
    length = len(text)
    while True:
        while index < length and text[index].isspace():
            index += 1
        if index >= length:
            break
        try:
            value, index = decoder.raw_decode(text, index)
        except json.JSONDecodeError as exc:
            raise WorkflowError(f"input is not a stream of JSON values: {exc}") from exc
        values.append(value)
    if len(values) == 1 and isinstance(values[0], list):
        return values[0]
    return values


def read_stream(stream: TextIO) -> str:
    """Read all of ``stream``, reporting undecodable bytes as a workflow error."""

    try:
        return stream.read()
    except UnicodeDecodeError as exc:
        raise WorkflowError(f"input is not valid UTF-8: {exc}") from exc


def build_store(runtime: RuntimeConfig) -> SnapshotStore:
    return SnapshotStore(runtime.state_dir)


def build_runner(runtime: RuntimeConfig) -> SubprocessRunner:
    return SubprocessRunner(
        install_hints={
            runtime.tools.gh: GH_INSTALL_HINT,
            runtime.tools.gog: GOG_INSTALL_HINT,
        }
    )


def emit(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))

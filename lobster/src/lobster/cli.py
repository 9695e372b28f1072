"""Lobster command-line interface.

What:
  Provide a Typer-based entry point exposing the snapshot primitive
  (``diff-last``, ``show``) and the polling workflows built on it
  (``github-pr-monitor``, ``email-triage``).

Why:
  Agents and shell pipelines call these commands on a schedule and branch on
  the ``changed`` flag. Wiring every command through the same runtime loader
  guarantees they all read and write the same state directory.

How:
  The root callback captures ``--config`` and ``--state-dir``; each command
  resolves :class:`RuntimeConfig`, builds its collaborators through
  :mod:`lobster._wiring`, and prints a single JSON document.

Interfaces:
  ``app`` (Typer application), ``diff_last``, ``show``, ``github_pr_monitor``,
  ``email_triage``, ``main``.

Invariants & Safety:
  - Exit codes follow shell expectations (``0`` success, ``1`` failure,
    ``2`` usage error).
  - stdout carries only the JSON result; diagnostics go to stderr.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import typer

from ._wiring import build_runner, build_store, emit, read_items, read_stream
from .config import ConfigLoadError, RuntimeConfig, load_runtime_config
from .state import StateError
from .utils.process import ProcessError
from .workflows import WorkflowError, run_email_triage, run_github_pr_monitor


app = typer.Typer(help="Lobster change-detection toolkit")

LOGGER = logging.getLogger("lobster.cli")

_KNOWN_ERRORS = (StateError, WorkflowError, ProcessError, ConfigLoadError)


@dataclass
class _Settings:
    """Global options shared by every command."""

    config: Optional[Path] = None
    state_dir: Optional[Path] = None


def _fail(command: str, exc: Exception) -> NoReturn:
    LOGGER.error("%s_failed: %s", command, exc)
    raise typer.Exit(code=1) from exc


def _runtime(ctx: typer.Context, command: str) -> RuntimeConfig:
    settings = ctx.obj if isinstance(ctx.obj, _Settings) else _Settings()
    try:
        return load_runtime_config(settings.config, state_dir=settings.state_dir)
    except ConfigLoadError as exc:
        _fail(command, exc)


@app.callback()
def _root(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to config.yaml (defaults to $LOBSTER_CONFIG_PATH or ~/.lobster/config.yaml)",
    ),
    state_dir: Optional[Path] = typer.Option(
        None,
        "--state-dir",
        help="Snapshot directory (defaults to $LOBSTER_STATE_DIR or ~/.lobster/state)",
    ),
) -> None:
    ctx.obj = _Settings(config=config, state_dir=state_dir)


@app.command("diff-last")
def diff_last(
    ctx: typer.Context,
    key_arg: Optional[str] = typer.Argument(None, metavar="KEY", help="State key"),
    key: Optional[str] = typer.Option(None, "--key", help="State key (takes precedence)"),
) -> None:
    """Compare items piped on stdin with the last stored snapshot.

    What:
      Read JSON items from stdin, collapse them into one snapshot, compare it
      with the record stored under the key, and print
      ``{kind, key, changed, before, after}``.

    How:
      Decode stdin with :func:`read_items` and delegate to
      :meth:`SnapshotStore.compare_items`.
    """

    state_key = key or key_arg
    if not state_key:
        raise typer.BadParameter("diff-last requires --key", param_hint="--key")
    runtime = _runtime(ctx, "diff_last")
    try:
        items = read_items(read_stream(sys.stdin))
        result = build_store(runtime).compare_items(state_key, items)
    except _KNOWN_ERRORS as exc:
        _fail("diff_last", exc)
    emit(result.as_dict())


@app.command("show")
def show(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="State key"),
) -> None:
    """Print the snapshot stored under a key, or ``null`` when none exists."""

    runtime = _runtime(ctx, "show")
    try:
        snapshot = build_store(runtime).load(key)
    except _KNOWN_ERRORS as exc:
        _fail("show", exc)
    emit(snapshot)


@app.command("github-pr-monitor")
def github_pr_monitor(
    ctx: typer.Context,
    repo: str = typer.Option(..., "--repo", help="Repository slug (owner/name)"),
    pr: int = typer.Option(..., "--pr", help="Pull request number"),
    key: Optional[str] = typer.Option(None, "--key", help="Override the state key"),
) -> None:
    """Snapshot a pull request and report whether it changed since the last run."""

    runtime = _runtime(ctx, "github_pr_monitor")
    try:
        report = run_github_pr_monitor(
            repo=repo,
            pr=pr,
            key=key,
            runner=build_runner(runtime),
            store=build_store(runtime),
            env=os.environ,
            cwd=Path.cwd(),
            gh=runtime.tools.gh,
        )
    except _KNOWN_ERRORS as exc:
        _fail("github_pr_monitor", exc)
    emit(report)


@app.command("email-triage")
def email_triage(
    ctx: typer.Context,
    query: Optional[str] = typer.Option(None, "--query", help="Gmail search query"),
    max_results: Optional[int] = typer.Option(None, "--max", min=1, help="Maximum messages"),
    account: Optional[str] = typer.Option(None, "--account", help="gog account to search"),
    diff_key: Optional[str] = typer.Option(
        None,
        "--diff-key",
        help="Also snapshot the triaged items under this state key",
    ),
) -> None:
    """Triage recent email into needs_reply / needs_action / fyi buckets.

    What:
      Run the keyword triage workflow and print its report.

    How:
      Falls back to the ``email_triage`` defaults from the runtime
      configuration for ``--query`` and ``--max``. With ``--diff-key`` the
      triaged items are compared through the snapshot store and the
      comparison is attached under ``diff``.
    """

    runtime = _runtime(ctx, "email_triage")
    try:
        report: dict[str, Any] = run_email_triage(
            runner=build_runner(runtime),
            query=query if query is not None else runtime.email_triage.query,
            max_results=max_results if max_results is not None else runtime.email_triage.max,
            account=account,
            env=os.environ,
            cwd=Path.cwd(),
            gog=runtime.tools.gog,
        )
        if diff_key:
            comparison = build_store(runtime).compare_items(diff_key, report["items"])
            report["diff"] = {"key": comparison.key, "changed": comparison.changed}
    except _KNOWN_ERRORS as exc:
        _fail("email_triage", exc)
    emit(report)


def main() -> None:
    """Execute the Typer application entry point."""

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    app(prog_name="lobster")


if __name__ == "__main__":  # pragma: no cover
    main()

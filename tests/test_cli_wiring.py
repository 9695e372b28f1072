"""CLI wiring tests ensuring Typer commands integrate with runtime helpers.

What:
  Drive ``diff-last``, ``show``, ``github-pr-monitor`` and ``email-triage``
  through :class:`typer.testing.CliRunner`, covering JSON output, state
  directory selection, usage errors, and failure exit codes.

Why:
  The CLI is how agents consume the snapshot primitive; regressions in option
  parsing or error mapping would break scheduled pipelines silently.

How:
  Point the commands at ``tmp_path`` through ``--state-dir`` or
  ``LOBSTER_STATE_DIR`` and replace the process runner with a
  :class:`unittest.mock.MagicMock` returning canned tool output.
"""
from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from lobster.cli import app
from lobster.utils.process import CommandNotFoundError, ProcessResult


runner = CliRunner()


def _diff(state_dir: Path, key: str, stdin: str):
    return runner.invoke(app, ["--state-dir", str(state_dir), "diff-last", "--key", key], input=stdin)


def test_diff_last_reports_first_then_unchanged(tmp_path: Path) -> None:
    """Piping the same item twice reports a change only the first time."""

    first = _diff(tmp_path, "k1", '{"a": 1}\n')
    second = _diff(tmp_path, "k1", '{"a": 1}\n')

    assert first.exit_code == 0, first.output
    assert json.loads(first.stdout) == {
        "kind": "diff.last",
        "key": "k1",
        "changed": True,
        "before": None,
        "after": {"a": 1},
    }
    assert json.loads(second.stdout)["changed"] is False
    assert json.loads((tmp_path / "k1.json").read_text()) == {"a": 1}


def test_diff_last_positional_key_and_env_state_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("LOBSTER_STATE_DIR", str(tmp_path / "env-state"))

    result = runner.invoke(app, ["diff-last", "inbox"], input="[1, 2]")

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["after"] == [1, 2]
    assert (tmp_path / "env-state" / "inbox.json").exists()


def test_diff_last_without_key_is_a_usage_error(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--state-dir", str(tmp_path), "diff-last"], input="{}")

    assert result.exit_code == 2


def test_diff_last_invalid_key_fails(tmp_path: Path) -> None:
    state_dir = tmp_path / "state"

    result = _diff(state_dir, "###", "{}")

    assert result.exit_code == 1
    assert not state_dir.exists()


def test_diff_last_corrupted_record_fails(tmp_path: Path) -> None:
    (tmp_path / "k1.json").write_text("{broken")

    result = _diff(tmp_path, "k1", '{"a": 1}')

    assert result.exit_code == 1
    assert (tmp_path / "k1.json").read_text() == "{broken"


def test_diff_last_rejects_non_json_input(tmp_path: Path) -> None:
    result = _diff(tmp_path, "k1", "definitely not json")

    assert result.exit_code == 1


def test_show_prints_record_or_null(tmp_path: Path) -> None:
    empty = runner.invoke(app, ["--state-dir", str(tmp_path), "show", "k1"])
    _diff(tmp_path, "k1", '{"b": 2}')
    stored = runner.invoke(app, ["--state-dir", str(tmp_path), "show", "k1"])

    assert empty.exit_code == 0
    assert json.loads(empty.stdout) is None
    assert json.loads(stored.stdout) == {"b": 2}


def test_invalid_config_file_fails(tmp_path: Path) -> None:
    config = tmp_path / "config.yaml"
    config.write_text("unknown: true\n")

    result = runner.invoke(app, ["--config", str(config), "show", "k1"])

    assert result.exit_code == 1


def test_github_pr_monitor_command(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    process = MagicMock()
    process.execute.return_value = ProcessResult(stdout='{"number": 9, "state": "OPEN"}', stderr="")
    monkeypatch.setattr("lobster.cli.build_runner", lambda runtime: process)

    result = runner.invoke(
        app,
        ["--state-dir", str(tmp_path), "github-pr-monitor", "--repo", "octo/repo", "--pr", "9"],
    )

    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["changed"] is True
    assert report["key"] == "github.pr:octo/repo#9"
    assert report["prSnapshot"] == {"number": 9, "state": "OPEN"}
    assert process.execute.call_args.args[0] == "gh"
    assert (tmp_path / "github.pr_octo_repo_9.json").exists()


def test_github_pr_monitor_missing_gh(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    process = MagicMock()
    process.execute.side_effect = CommandNotFoundError("gh", "install GitHub CLI")
    monkeypatch.setattr("lobster.cli.build_runner", lambda runtime: process)

    result = runner.invoke(
        app,
        ["--state-dir", str(tmp_path), "github-pr-monitor", "--repo", "octo/repo", "--pr", "9"],
    )

    assert result.exit_code == 1


def test_email_triage_with_diff_key(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    process = MagicMock()
    process.execute.return_value = ProcessResult(
        stdout=json.dumps([{"id": "m1", "subject": "Invoice", "snippet": "", "from": "a@b.c"}]),
        stderr="",
    )
    monkeypatch.setattr("lobster.cli.build_runner", lambda runtime: process)
    args = ["--state-dir", str(tmp_path), "email-triage", "--max", "3", "--diff-key", "inbox"]

    first = runner.invoke(app, args)
    second = runner.invoke(app, args)

    assert first.exit_code == 0, first.output
    report = json.loads(first.stdout)
    assert report["max"] == 3
    assert report["query"] == "newer_than:1d"
    assert report["summary"]["needs_action"] == 1
    assert report["diff"] == {"key": "inbox", "changed": True}
    assert json.loads(second.stdout)["diff"]["changed"] is False
    # A single triaged item is stored as the bare object.
    assert json.loads((tmp_path / "inbox.json").read_text())["id"] == "m1"
    command, argv = process.execute.call_args.args
    assert command == "gog"
    assert argv[argv.index("--max") + 1] == "3"

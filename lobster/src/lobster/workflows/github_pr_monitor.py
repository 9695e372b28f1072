"""Pull-request monitor that reports when a PR's visible state changes.

What:
  Fetch a pull request's JSON view through the GitHub CLI and compare it with
  the snapshot stored for the PR's state key.

Why:
  Agents polling a PR only want to act when something observable moved
  (review decision, mergeability, draft flag, head branch). Storing the last
  view through :class:`SnapshotStore` gives idempotent answers across runs.

How:
  Run ``gh pr view <pr> --repo <repo> --json <fields>``, parse stdout as JSON,
  and hand the resulting object to :meth:`SnapshotStore.compare` under
  ``github.pr:<repo>#<pr>`` (or a caller-supplied key).

Interfaces:
  :func:`run_github_pr_monitor`, :data:`PR_FIELDS`.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Optional

from ..state import SnapshotStore
from ..utils.logging import get_logger
from ..utils.process import CommandRunner
from .errors import WorkflowError


LOGGER = get_logger("lobster.workflows.github_pr_monitor")

GH_INSTALL_HINT = "install GitHub CLI"

PR_FIELDS = (
    "number",
    "title",
    "url",
    "state",
    "isDraft",
    "mergeable",
    "reviewDecision",
    "author",
    "baseRefName",
    "headRefName",
    "updatedAt",
)


def default_pr_key(repo: str, pr: int | str) -> str:
    return f"github.pr:{repo}#{pr}"


def run_github_pr_monitor(
    *,
    repo: Optional[str],
    pr: Optional[int | str],
    runner: CommandRunner,
    store: SnapshotStore,
    key: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
    gh: str = "gh",
) -> dict[str, Any]:
    """Snapshot a pull request and report whether it changed.

    Args:
      repo: ``owner/name`` repository slug.
      pr: Pull request number.
      runner: Capability used to execute ``gh``.
      store: Snapshot store holding the previous PR view.
      key: Optional state key; defaults to ``github.pr:<repo>#<pr>``.
      env: Environment passed to ``gh``.
      cwd: Working directory for ``gh``.
      gh: Executable name of the GitHub CLI.

    Returns:
      Mapping with ``kind``, ``repo``, ``pr``, ``key``, ``changed`` and
      ``prSnapshot``.

    Raises:
      WorkflowError: If ``repo``/``pr`` are missing or ``gh`` output is not
        JSON.
      ProcessError: If ``gh`` is missing or exits non-zero.
      StateError: If the snapshot cannot be compared or persisted.
    """

    if not repo or pr is None or str(pr).strip() == "":
        raise WorkflowError("github.pr.monitor requires repo and pr")
    try:
        pr_number = int(pr)
    except (TypeError, ValueError) as exc:
        raise WorkflowError(f"github.pr.monitor pr must be a number, got {pr!r}") from exc

    state_key = key or default_pr_key(repo, pr)
    argv = ["pr", "view", str(pr), "--repo", str(repo), "--json", ",".join(PR_FIELDS)]
    result = runner.execute(gh, argv, env=env, cwd=cwd)

    try:
        current = json.loads(result.stdout.strip())
    except json.JSONDecodeError as exc:
        raise WorkflowError("gh returned non-JSON output") from exc

    comparison = store.compare(state_key, current)
    LOGGER.info("pr_monitored", repo=repo, pr=pr_number, key=state_key, changed=comparison.changed)
    return {
        "kind": "github.pr.monitor",
        "repo": repo,
        "pr": pr_number,
        "key": state_key,
        "changed": comparison.changed,
        "prSnapshot": current,
    }

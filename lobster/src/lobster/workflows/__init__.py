"""Polling workflows that feed snapshots into the state store.

Interfaces:
  - run_github_pr_monitor: Snapshot a pull request view via ``gh``.
  - run_email_triage / classify_email / parse_email_address: Inbox triage via
    ``gog``.
  - WorkflowError: Invalid arguments or unusable tool output.
"""

from .email_triage import (
    GOG_INSTALL_HINT,
    TriagedEmail,
    classify_email,
    parse_email_address,
    run_email_triage,
)
from .errors import WorkflowError
from .github_pr_monitor import GH_INSTALL_HINT, PR_FIELDS, default_pr_key, run_github_pr_monitor

__all__ = [
    "run_github_pr_monitor",
    "default_pr_key",
    "PR_FIELDS",
    "GH_INSTALL_HINT",
    "run_email_triage",
    "classify_email",
    "parse_email_address",
    "TriagedEmail",
    "GOG_INSTALL_HINT",
    "WorkflowError",
]

"""Keyword-based inbox triage over ``gog gmail search`` results.

What:
  Search Gmail through the ``gog`` CLI, normalise each message summary, and
  sort it into ``needs_reply``, ``needs_action`` or ``fyi`` buckets.

Why:
  A cheap, deterministic first pass over the inbox lets an agent decide what
  deserves attention without sending message content anywhere. The triaged
  item list is also a natural snapshot for "did my inbox change?" checks.

How:
  Run ``gog gmail search <query> --max <n> --json --no-input`` with
  ``GOG_ACCOUNT`` injected when an account is selected, parse the JSON array,
  map every raw entry onto :class:`TriagedEmail`, and classify it with the
  ordered keyword rules in :func:`classify_email`.

Interfaces:
  :func:`run_email_triage`, :func:`classify_email`,
  :func:`parse_email_address`, :class:`TriagedEmail`.

Invariants & Safety:
  - Classification is first-match-wins in a fixed order: promotional words,
    finance words, urgency words, question mark, default.
  - Log entries never include subjects or snippets.
"""
from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..utils.logging import get_logger
from ..utils.process import CommandRunner
from .errors import WorkflowError


LOGGER = get_logger("lobster.workflows.email_triage")

GOG_INSTALL_HINT = "install steipete/gog from ClawdHub"
ACCOUNT_ENV = "GOG_ACCOUNT"

Bucket = Literal["needs_reply", "needs_action", "fyi"]
BUCKETS: tuple[Bucket, ...] = ("needs_reply", "needs_action", "fyi")

_PROMO = re.compile(r"unsubscribe|newsletter|promo|sale|discount")
_FINANCE = re.compile(r"invoice|receipt|payment|charged|billing")
_URGENT = re.compile(r"asap|urgent|action required|deadline|due")
_ANGLE_ADDRESS = re.compile(r"<([^>]+)>")


@dataclass(frozen=True)
class Classification:
    bucket: Bucket
    reason: str


class TriagedEmail(BaseModel):
    """Normalised message summary with its triage decision."""

    model_config = ConfigDict(populate_by_name=True)

    id: Any = None
    thread_id: Any = Field(default=None, alias="threadId")
    sender: str = Field(default="", alias="from")
    from_email: str = Field(default="", alias="fromEmail")
    subject: str = ""
    snippet: str = ""
    date: Any = None
    bucket: Bucket
    reason: str
    raw: Any = None


def classify_email(subject: str, snippet: str) -> Classification:
    """Assign a bucket using the ordered keyword rules.

    Args:
      subject: Message subject.
      snippet: Message preview text.

    Returns:
      The first matching :class:`Classification`.
    """

    text = f"{subject} {snippet}".lower()
    if _PROMO.search(text):
        return Classification("fyi", "newsletter/promo-ish")
    if _FINANCE.search(text):
        return Classification("needs_action", "finance keyword")
    if _URGENT.search(text):
        return Classification("needs_action", "urgency keyword")
    if "?" in text:
        return Classification("needs_reply", "question mark")
    return Classification("fyi", "default")


def normalize_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_email_address(sender: Any) -> str:
    """Extract ``addr`` from ``"Name <addr>"``; otherwise return the trimmed input."""

    text = normalize_string(sender).strip()
    match = _ANGLE_ADDRESS.search(text)
    return (match.group(1) if match else text).strip()


def _field(raw: Any, name: str) -> Any:
    # gog emits lower-case keys; older builds used capitalised ones.
    if not isinstance(raw, Mapping):
        return None
    value = raw.get(name)
    if value is None:
        value = raw.get(name[:1].upper() + name[1:])
    return value


def triage_item(raw: Any) -> TriagedEmail:
    """Map one raw search result onto a classified :class:`TriagedEmail`."""

    subject = normalize_string(_field(raw, "subject"))
    sender = normalize_string(_field(raw, "from"))
    snippet = normalize_string(_field(raw, "snippet"))
    classification = classify_email(subject, snippet)
    return TriagedEmail(
        id=_field(raw, "id"),
        thread_id=_field(raw, "threadId"),
        sender=sender,
        from_email=parse_email_address(sender),
        subject=subject,
        snippet=snippet,
        date=_field(raw, "date"),
        bucket=classification.bucket,
        reason=classification.reason,
        raw=raw,
    )


def _parse_search_output(stdout: str) -> list[Any]:
    try:
        parsed = json.loads(stdout.strip() or "[]")
    except json.JSONDecodeError as exc:
        raise WorkflowError("gog gmail search returned non-JSON output") from exc
    return parsed if isinstance(parsed, list) else [parsed]


def run_email_triage(
    *,
    runner: CommandRunner,
    query: str = "newer_than:1d",
    max_results: int = 20,
    account: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
    gog: str = "gog",
) -> dict[str, Any]:
    """Search the inbox and bucket the results.

    What:
      Produce the ``email.triage`` report consumed by agents and, optionally,
      by the snapshot store.

    Why:
      Keeping the search, normalisation and classification in one call gives
      the CLI and tests a single seam to exercise with a fake runner.

    How:
      Copy ``env`` (adding ``GOG_ACCOUNT`` when ``account`` is set), execute
      the search, parse stdout (empty output means no messages), then build the
      summary counts and per-bucket lists from the triaged items.

    Args:
      runner: Capability used to execute ``gog``.
      query: Gmail search query.
      max_results: Maximum number of messages requested from ``gog``.
      account: Optional ``gog`` account selector.
      env: Base environment for the child process.
      cwd: Working directory for ``gog``.
      gog: Executable name of the gog CLI.

    Returns:
      Mapping with ``kind``, ``query``, ``max``, ``summary``, ``items`` and
      ``buckets``.

    Raises:
      WorkflowError: If ``gog`` output is not JSON.
      ProcessError: If ``gog`` is missing or exits non-zero.
    """

    child_env = dict(os.environ if env is None else env)
    if account:
        child_env[ACCOUNT_ENV] = str(account)

    argv = ["gmail", "search", str(query), "--max", str(max_results), "--json", "--no-input"]
    result = runner.execute(gog, argv, env=child_env, cwd=cwd)

    triaged = [triage_item(raw) for raw in _parse_search_output(result.stdout)]
    items = [item.model_dump(by_alias=True) for item in triaged]
    buckets = {bucket: [item for item in items if item["bucket"] == bucket] for bucket in BUCKETS}
    summary = {"total": len(items), **{bucket: len(buckets[bucket]) for bucket in BUCKETS}}

    LOGGER.info("email_triaged", query=query, **summary)
    return {
        "kind": "email.triage",
        "query": query,
        "max": max_results,
        "summary": summary,
        "items": items,
        "buckets": buckets,
    }

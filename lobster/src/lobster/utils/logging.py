"""Lobster logging helpers with deterministic JSON emission and redaction safeguards.

What:
  Offer a tiny facade over Python streams so every Lobster component can emit
  JSON log lines with consistent fields and automatic removal of sensitive
  payloads.

Why:
  Lobster commands write their results to stdout as JSON so they can be piped
  into other tools. Diagnostics therefore go to stderr as structured lines that
  stay greppable, and inbox-derived fields (subjects, snippets) never leak into
  log collectors while debugging the email triage workflow.

How:
  Provide a :class:`JsonLogger` dataclass that accepts a target stream, a
  component tag, and a minimum severity. ``extra`` dictionaries are copied and
  scrubbed via a recursive redaction helper before being serialised with
  ``json.dump``.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`.

Invariants & Safety:
  - The emitted payload always includes an ISO8601 timestamp, severity, and
    component name so downstream tooling can index entries reliably.
  - Known sensitive keys (``subject``, ``body``, ``preview``, ``snippet``) are
    replaced with ``[redacted]`` even inside nested dictionaries.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
LEVEL_ENV = "LOBSTER_LOG_LEVEL"

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "WARNING": 30, "ERROR": 40}
_SENSITIVE_KEYS = frozenset({"subject", "body", "preview", "snippet"})


@dataclass
class JsonLogger:
    """Structured JSON logger with automatic redaction.

    What:
      Emits single-line JSON entries that include timestamps, severity, a
      component tag, and optional supplemental fields.

    Why:
      Centralising structured logging avoids duplicating the redaction logic
      and guarantees a uniform schema for test assertions.

    How:
      Stores the destination stream, component label, and threshold, then
      exposes :meth:`debug`, :meth:`info`, :meth:`warning`, and :meth:`error`
      helpers that funnel into :meth:`log`.
    """

    stream: Any = field(default_factory=lambda: sys.stderr)
    component: str = "lobster"
    level: str = "WARN"

    def enabled(self, level: str) -> bool:
        threshold = _LEVELS.get(self.level.upper(), _LEVELS["WARN"])
        return _LEVELS.get(level.upper(), _LEVELS["INFO"]) >= threshold

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        What:
          Serialises ``message`` and ``extra`` metadata using the Lobster log
          schema (``ts``, ``lvl``, ``msg``, ``component``).

        How:
          Skips entries below the configured threshold, merges a redacted copy
          of ``extra``, writes one JSON line, and flushes the stream.

        Args:
          level: Human-readable severity (e.g., ``"info"`` or ``"error"``).
          message: Core log message.
          extra: Optional context dictionary that will be redacted recursively.
        """

        if not self.enabled(level):
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of ``data`` with sensitive values masked.

        Walks nested dictionaries and lists of dictionaries so triaged email
        items logged as context lose their subject and snippet fields.
        """

        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            elif isinstance(value, list):
                result[key] = [
                    JsonLogger._redact(item) if isinstance(item, dict) else item for item in value
                ]
            else:
                result[key] = value
        return result


def get_logger(component: str, *, level: Optional[str] = None) -> JsonLogger:
    """Construct a :class:`JsonLogger` for the requested component.

    Args:
      component: Logical subsystem name to include in log payloads.
      level: Minimum severity; defaults to ``LOBSTER_LOG_LEVEL`` or ``WARN``.

    Returns:
      Configured :class:`JsonLogger` writing to ``stderr``.
    """

    resolved = level or os.environ.get(LEVEL_ENV, "").strip() or "WARN"
    return JsonLogger(component=component, level=resolved)

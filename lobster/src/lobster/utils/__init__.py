"""Expose the public utility surface for Lobster.

What:
  Re-export the structured logger and the external process capability so
  callers can import them without knowing the module layout.

Interfaces:
  ``get_logger``, ``JsonLogger``, ``CommandRunner``, ``SubprocessRunner``,
  ``ProcessResult``, ``ProcessError``, ``CommandNotFoundError``,
  ``CommandFailedError``, ``CommandStartError``.
"""

from .logging import JsonLogger, get_logger
from .process import (
    CommandFailedError,
    CommandNotFoundError,
    CommandRunner,
    CommandStartError,
    ProcessError,
    ProcessResult,
    SubprocessRunner,
)

__all__ = [
    "get_logger",
    "JsonLogger",
    "CommandRunner",
    "SubprocessRunner",
    "ProcessResult",
    "ProcessError",
    "CommandNotFoundError",
    "CommandFailedError",
    "CommandStartError",
]

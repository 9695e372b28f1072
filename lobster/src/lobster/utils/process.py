"""Capability interface for running external command-line tools.

What:
  Define the :class:`CommandRunner` protocol used by workflows to invoke tools
  such as ``gh`` and ``gog``, and a :class:`SubprocessRunner` implementation
  backed by :func:`subprocess.run`.

Why:
  Workflows only need "stdout plus exit information" from a tool. Hiding the
  process machinery behind a small protocol lets tests substitute an in-memory
  fake and keeps the snapshot store unaware of how its input was produced.

How:
  ``SubprocessRunner.execute`` closes stdin, captures stdout/stderr as text,
  and converts a missing or unstartable executable or a non-zero exit status
  into typed :class:`ProcessError` subclasses.

Interfaces:
  :class:`ProcessResult`, :class:`CommandRunner`, :class:`SubprocessRunner`,
  :class:`ProcessError`, :class:`CommandNotFoundError`,
  :class:`CommandFailedError`, :class:`CommandStartError`.

Invariants & Safety:
  - Commands run without a shell; arguments are passed as a list.
  - Failures never return a partial result; callers either receive a
    successful :class:`ProcessResult` or an exception.
"""
from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Protocol, Sequence

from .logging import get_logger


LOGGER = get_logger("lobster.process")


class ProcessError(RuntimeError):
    """Base error for external command failures."""


class CommandNotFoundError(ProcessError):
    """Raised when the requested executable is not on ``PATH``."""

    def __init__(self, command: str, hint: Optional[str] = None) -> None:
        message = f"{command} not found on PATH"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.command = command


class CommandStartError(ProcessError):
    """Raised when the operating system refuses to start the command."""

    def __init__(self, command: str, cause: OSError) -> None:
        super().__init__(f"{command} could not be started: {cause}")
        self.command = command


class CommandFailedError(ProcessError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, command: str, returncode: int, detail: str) -> None:
        super().__init__(f"{command} failed ({returncode}): {detail}")
        self.command = command
        self.returncode = returncode
        self.detail = detail


@dataclass(frozen=True)
class ProcessResult:
    """Captured output of a successful command."""

    stdout: str
    stderr: str
    returncode: int = 0


class CommandRunner(Protocol):
    """Execute ``command`` with ``args`` and return its captured output."""

    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> ProcessResult: ...


class SubprocessRunner:
    """Run commands through :func:`subprocess.run`.

    What:
      Production implementation of :class:`CommandRunner`.

    Why:
      Workflows need consistent error messages across tools, including an
      install hint when the executable is missing.

    How:
      Looks up an optional per-command install hint, runs the process with
      captured text output, and raises :class:`CommandFailedError` using the
      trimmed stderr (or stdout when stderr is empty) as detail.
    """

    def __init__(self, install_hints: Optional[Mapping[str, str]] = None) -> None:
        self._hints = dict(install_hints or {})

    def execute(
        self,
        command: str,
        args: Sequence[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> ProcessResult:
        argv = [command, *[str(arg) for arg in args]]
        LOGGER.debug("process_started", command=command, argc=len(argv) - 1)
        try:
            completed = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                env=dict(env) if env is not None else None,
                cwd=str(cwd) if cwd is not None else None,
                check=False,
            )
        except FileNotFoundError as exc:
            if exc.filename in (None, command):
                raise CommandNotFoundError(command, self._hints.get(command)) from exc
            raise CommandStartError(command, exc) from exc
        except OSError as exc:
            raise CommandStartError(command, exc) from exc
        if completed.returncode != 0:
            detail = completed.stderr.strip() or completed.stdout.strip()
            LOGGER.warning("process_failed", command=command, returncode=completed.returncode)
            raise CommandFailedError(command, completed.returncode, detail)
        return ProcessResult(
            stdout=completed.stdout,
            stderr=completed.stderr,
            returncode=completed.returncode,
        )

"""Errors raised by workflow input validation and tool output parsing."""
from __future__ import annotations


class WorkflowError(ValueError):
    """Raised when workflow arguments are missing or a tool returns unusable output."""

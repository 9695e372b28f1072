"""Pydantic models describing the Lobster runtime configuration."""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


DEFAULT_STATE_DIR = Path("~/.lobster/state")


class ToolsConfig(BaseModel):
    """Executable names for the external command-line tools."""

    model_config = ConfigDict(extra="forbid")

    gh: str = "gh"
    gog: str = "gog"

    @field_validator("gh", "gog")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("tool executable must not be blank")
        return value


class EmailTriageConfig(BaseModel):
    """Defaults applied by the ``email-triage`` command."""

    model_config = ConfigDict(extra="forbid")

    query: str = "newer_than:1d"
    max: int = Field(default=20, gt=0)


class RuntimeConfig(BaseModel):
    """Root configuration resolved from arguments, environment, and YAML."""

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    state_dir: Path = Field(default=DEFAULT_STATE_DIR, validate_default=True)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    email_triage: EmailTriageConfig = Field(default_factory=EmailTriageConfig)

    @field_validator("state_dir", mode="before")
    @classmethod
    def _reject_blank_state_dir(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("state_dir must not be blank")
        return value

    @field_validator("state_dir")
    @classmethod
    def _expand_state_dir(cls, value: Path) -> Path:
        return value.expanduser()

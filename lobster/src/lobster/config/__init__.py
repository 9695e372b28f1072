"""Lobster configuration package.

What:
  Provide the import surface for runtime configuration loading and the
  pydantic schema it validates against.

Interfaces:
  - load_runtime_config: Resolve settings from arguments, environment, YAML.
  - RuntimeConfig / ToolsConfig / EmailTriageConfig: Validated models.
  - ConfigLoadError / RuntimeConfigError: Failure types.
"""

from .loader import (
    CONFIG_ENV,
    STATE_DIR_ENV,
    ConfigLoadError,
    RuntimeConfigError,
    load_runtime_config,
)
from .schema import DEFAULT_STATE_DIR, EmailTriageConfig, RuntimeConfig, ToolsConfig

__all__ = [
    "load_runtime_config",
    "ConfigLoadError",
    "RuntimeConfigError",
    "CONFIG_ENV",
    "STATE_DIR_ENV",
    "DEFAULT_STATE_DIR",
    "RuntimeConfig",
    "ToolsConfig",
    "EmailTriageConfig",
]

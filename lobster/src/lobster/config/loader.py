"""Strict loader for the Lobster runtime configuration.

What:
  Resolve the runtime settings (snapshot storage root, external tool names,
  email triage defaults) from explicit arguments, environment variables, and
  an optional ``config.yaml`` document.

Why:
  The snapshot store must receive its root directory as an explicit value so
  tests and scripted runs can point it at a temporary directory. Resolving
  every environment-derived setting in one place keeps that precedence chain
  consistent across the CLI commands.

How:
  Locate the YAML file (explicit path, ``LOBSTER_CONFIG_PATH``, then
  ``~/.lobster/config.yaml`` when present), parse it with PyYAML, overlay the
  ``LOBSTER_STATE_DIR`` environment variable and any explicit ``state_dir``,
  and validate the merged payload with :class:`RuntimeConfig`.

Interfaces:
  :func:`load_runtime_config`, :class:`ConfigLoadError`,
  :class:`RuntimeConfigError`.

Invariants:
  - Precedence for the storage root is: explicit argument, environment
    variable (ignored when blank), config file, ``~/.lobster/state``.
  - An explicitly requested config file that is missing is an error; the
    implicit default location is optional.
  - All payloads pass strict Pydantic validation before they are returned.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from .schema import RuntimeConfig


class ConfigLoadError(Exception):
    """Base error for configuration parsing or validation failures."""


class RuntimeConfigError(ConfigLoadError):
    """Raised when ``config.yaml`` cannot be read, parsed, or validated."""


CONFIG_ENV = "LOBSTER_CONFIG_PATH"
STATE_DIR_ENV = "LOBSTER_STATE_DIR"
DEFAULT_CONFIG_PATH = Path("~/.lobster/config.yaml")


def _config_path(path: Optional[Path], env: Mapping[str, str]) -> Optional[Path]:
    """Return the config file to read, or ``None`` when no file applies."""

    if path is not None:
        return path.expanduser()
    env_path = (env.get(CONFIG_ENV) or "").strip()
    if env_path:
        return Path(env_path).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.exists():
        return default
    return None


def _read_payload(path: Path) -> dict[str, Any]:
    """Parse ``path`` into a mapping payload.

    Raises:
      RuntimeConfigError: If the file cannot be read, is not valid YAML, or
        does not contain a mapping at the top level.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise RuntimeConfigError(f"Configuration file missing: {path}") from exc
    except OSError as exc:
        raise RuntimeConfigError(f"Unable to read configuration file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise RuntimeConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise RuntimeConfigError(f"{path} must contain a mapping at the top-level")
    return payload


def load_runtime_config(
    path: Optional[Path | str] = None,
    *,
    state_dir: Optional[Path | str] = None,
    env: Optional[Mapping[str, str]] = None,
) -> RuntimeConfig:
    """Resolve and validate the runtime configuration.

    What:
      Build a :class:`RuntimeConfig` from the config file and overrides.

    Why:
      Commands need a single validated object to construct the snapshot store
      and process runner; reading the environment here keeps the rest of the
      code free of ad-hoc ``os.environ`` lookups.

    How:
      Read the optional YAML payload, overlay ``LOBSTER_STATE_DIR`` and the
      explicit ``state_dir`` argument, then validate.

    Args:
      path: Optional explicit location of ``config.yaml``.
      state_dir: Optional explicit storage root, overriding everything else.
      env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
      The validated runtime configuration.

    Raises:
      RuntimeConfigError: If the configuration cannot be loaded or validated.
    """

    environ = os.environ if env is None else env
    requested = Path(path) if isinstance(path, (str, Path)) else None
    config_path = _config_path(requested, environ)

    payload: dict[str, Any] = {}
    if config_path is not None:
        payload = _read_payload(config_path)

    env_state_dir = (environ.get(STATE_DIR_ENV) or "").strip()
    if env_state_dir:
        payload["state_dir"] = env_state_dir
    if state_dir is not None and str(state_dir).strip():
        payload["state_dir"] = str(state_dir)

    try:
        return RuntimeConfig.model_validate(payload)
    except ValidationError as exc:
        source = config_path if config_path is not None else "<defaults>"
        raise RuntimeConfigError(f"Invalid runtime configuration ({source}): {exc}") from exc

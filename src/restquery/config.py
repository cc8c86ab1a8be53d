"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles the persistent configuration of the query builder:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.restquery/`` on macOS and Windows. See :func:`get_config_dir`.
* **Global config** -- A single :class:`~restquery.models.GlobalConfig`
  JSON file holding the user's encoder defaults.
* **Project config** -- An optional ``./restquery.json`` whose ``encoder``
  key overrides the global defaults for one repository.
* **Precedence resolution** -- :func:`resolve_encoder_config` merges
  explicit arguments, environment variables, project config, and global
  config into the effective :class:`~restquery.models.EncoderConfig`.

All file writes use an atomic temp-file-then-rename strategy
(:func:`_atomic_write`) to prevent data loss on crash or power failure.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from restquery.exceptions import ConfigError
from restquery.models import EncoderConfig, GlobalConfig

_APP_NAME = "restquery"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "restquery.json"

ENV_MISSING_REQUIRED = "RESTQUERY_MISSING_REQUIRED"
ENV_DEFAULT_STYLE = "RESTQUERY_DEFAULT_STYLE"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/restquery/`` (default ``~/.config/restquery/``).
    On macOS/Windows: ``~/.restquery/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_CONFIG_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".config"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is an atomic rename on POSIX systems. On any failure the
    temp file is removed and the error re-raised.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close below
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration from the config directory.

    Returns:
        The deserialised :class:`~restquery.models.GlobalConfig`, or a
        default instance when the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    """Persist the global configuration atomically to disk."""
    data = config.model_dump(mode="json")
    _atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./restquery.json``.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_encoder_config(
    missing_required: Optional[str] = None,
    default_style: Optional[str] = None,
) -> EncoderConfig:
    """Resolve the effective encoder config with the full precedence chain.

    Precedence (high to low):
        1. Explicit arguments (``missing_required``, ``default_style``)
        2. Environment variables (``RESTQUERY_MISSING_REQUIRED``,
           ``RESTQUERY_DEFAULT_STYLE``)
        3. Project config (``./restquery.json``, ``encoder`` key)
        4. User config (``~/.config/restquery/config.json``)
        5. Defaults

    Raises:
        ConfigError: If any layer holds an invalid value.
    """
    # 5 + 4. Global config fills in defaults automatically
    values: dict[str, Any] = load_global_config().encoder.model_dump(mode="json")

    # 3. Project-local overrides
    project = load_project_config()
    if project is not None:
        project_encoder = project.get("encoder", {})
        if not isinstance(project_encoder, dict):
            raise ConfigError("Project config key 'encoder' must be a JSON object")
        values.update(project_encoder)

    # 2. Environment
    env_missing = os.environ.get(ENV_MISSING_REQUIRED)
    if env_missing:
        values["missing_required"] = env_missing
    env_style = os.environ.get(ENV_DEFAULT_STYLE)
    if env_style:
        values["default_style"] = env_style

    # 1. Explicit arguments
    if missing_required is not None:
        values["missing_required"] = missing_required
    if default_style is not None:
        values["default_style"] = default_style

    try:
        return EncoderConfig.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid encoder config: {exc}") from exc

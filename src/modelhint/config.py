"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for modelhint:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.modelhint/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`.
* **Global config** -- A single :class:`~modelhint.models.HintConfig`
  JSON file storing user-wide defaults (ORM class names, database URL).
* **Project config** -- ``./modelhint.json`` in the project root, deep-merged
  over the global config.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, project-local config, and global config into the
  final effective configuration.

All file writes use an atomic temp-file-then-rename strategy
(:func:`atomic_write`) so that an interrupted run never leaves a truncated
model file or hints file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from modelhint.exceptions import ConfigError
from modelhint.models import HintConfig

_APP_NAME = "modelhint"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "modelhint.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/modelhint/`` (default ``~/.config/modelhint/``).
    On macOS/Windows: ``~/.modelhint/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/modelhint/`` (default ``~/.local/share/modelhint/``).
    On macOS/Windows: ``~/.modelhint/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    On success the temp file is renamed over *path*; on any failure the temp
    file is cleaned up. The permission bits of an existing *path* are kept.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    mode: Optional[int] = None
    if path.exists():
        mode = path.stat().st_mode & 0o777

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
            newline="",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
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
    """Path to the global config file."""
    return get_config_dir() / _CONFIG_FILENAME


def _read_json(path: Path, label: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} at {path}: {exc}") from exc


def load_global_config_data() -> dict[str, Any]:
    """Return the raw global config dict, or ``{}`` when the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = _global_config_path()
    if not path.is_file():
        return {}
    data = _read_json(path, "global config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid global config at {path}: expected a JSON object")
    return data


def load_global_config() -> HintConfig:
    """Load the global configuration from the XDG config directory.

    Returns:
        The deserialised :class:`~modelhint.models.HintConfig`. If the
        file does not exist, a default instance is returned.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or fails
            Pydantic validation.
    """
    data = load_global_config_data()
    try:
        return HintConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid global config at {_global_config_path()}: {exc}") from exc


def save_global_config(config: HintConfig) -> None:
    """Persist the global configuration atomically to disk.

    Args:
        config: The configuration to save.
    """
    data = config.model_dump(mode="json")
    atomic_write(_global_config_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``./modelhint.json``.

    Project-local config sits between global config and environment variables
    in the precedence chain. It typically pins the model locations and the
    database URL of one application.

    Returns:
        The parsed JSON as a dict, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but contains invalid JSON or is not
            a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return *base* updated with *override*, merging nested dicts key by key."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


# --- Precedence resolution ---


def resolve_config(
    cli_dirs: Optional[list[str]] = None,
    cli_filename: Optional[str] = None,
    cli_ignore: Optional[list[str]] = None,
) -> HintConfig:
    """Resolve config with full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_filename``; ``cli_dirs`` and ``cli_ignore`` are
           appended to the configured lists rather than replacing them)
        2. Environment variables (``MODELHINT_DATABASE_URL``,
           ``MODELHINT_FILENAME``)
        3. Project config (``./modelhint.json``)
        4. User config (``~/.config/modelhint/config.json``)
        5. Defaults

    Returns:
        The effective :class:`~modelhint.models.HintConfig`.

    Raises:
        ConfigError: If any config layer is invalid.
    """
    # 5 + 4. Global config (defaults fill in automatically)
    data = load_global_config_data()

    # 3. Project-local config
    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    try:
        config = HintConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    # 2. Environment variables
    env_url = os.environ.get("MODELHINT_DATABASE_URL")
    if env_url:
        config.database.url = env_url
    env_filename = os.environ.get("MODELHINT_FILENAME")
    if env_filename:
        config.filename = env_filename

    # 1. CLI flags
    if cli_dirs:
        config.model_locations = [*config.model_locations, *cli_dirs]
    if cli_filename is not None:
        config.filename = cli_filename
    if cli_ignore:
        config.ignore = [*config.ignore, *cli_ignore]

    return config


def split_names(value: Optional[str]) -> list[str]:
    """Split a comma-separated CLI value into trimmed, non-empty names."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]

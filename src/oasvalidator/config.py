"""Where oasvalidator keeps its settings, and how they are combined.

Two files may hold a :class:`~oasvalidator.models.ValidatorConfig`:

* the **global** file, ``config.json`` in the user's config directory
  (:func:`get_config_dir`), written by ``oasvalidator config init``;
* a **project** file, ``oasvalidator.json`` in the working directory,
  typically committed next to the OpenAPI document it configures.

:func:`resolve_config` layers them, lowest priority first: built-in
defaults, global file, project file, ``OASVALIDATOR_*`` environment
variables, CLI flags. Only the keys a layer sets are overridden, so a
project file containing ``{"enforce": true}`` keeps the user's output
preferences.

Directories follow the XDG Base Directory layout on Linux and BSD and fall
back to ``~/.oasvalidator/`` elsewhere. Files are replaced atomically
(:func:`_atomic_write`) so an interrupted ``config init`` never leaves a
truncated file behind.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

import pydantic

from oasvalidator.exceptions import ConfigError
from oasvalidator.models import ValidatorConfig

_APP_NAME = "oasvalidator"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "oasvalidator.json"

ENV_ENFORCE = "OASVALIDATOR_ENFORCE"
ENV_FORMAT = "OASVALIDATOR_FORMAT"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


# --- Directories ---


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(env_var: str, xdg_default: tuple[str, ...], fallback: tuple[str, ...]) -> Path:
    """Return (and create) an application directory.

    On XDG platforms the base is ``$env_var`` or ``~/<xdg_default...>``, and
    the application name is appended. Elsewhere the directory is
    ``~/.oasvalidator/<fallback...>``.
    """
    if _is_xdg_platform():
        base = Path(os.environ[env_var]) if os.environ.get(env_var) else Path.home().joinpath(*xdg_default)
        path = base / _APP_NAME
    else:
        path = Path.home().joinpath(f".{_APP_NAME}", *fallback)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """``$XDG_CONFIG_HOME/oasvalidator`` (default ``~/.config/oasvalidator``)."""
    return _app_dir("XDG_CONFIG_HOME", (".config",), ())


def get_data_dir() -> Path:
    """``$XDG_DATA_HOME/oasvalidator`` (default ``~/.local/share/oasvalidator``).

    Holds crash logs. On macOS and Windows this is ``~/.oasvalidator/logs``.
    """
    return _app_dir("XDG_DATA_HOME", (".local", "share"), ("logs",))


# --- Files ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* in one rename.

    The text is written to a sibling temporary file, flushed to disk, then
    moved over *path* with ``os.replace``. The temporary file is removed if
    any step fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise


def _read_json_object(path: Path, label: str) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Invalid {label} config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid {label} config at {path}: expected a JSON object")
    return data


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> ValidatorConfig:
    """Read the global config file, or return defaults when there is none.

    Raises:
        ConfigError: If the file is not a JSON object or does not describe
            a valid :class:`~oasvalidator.models.ValidatorConfig`.
    """
    path = global_config_path()
    if not path.is_file():
        return ValidatorConfig()
    data = _read_json_object(path, "global")
    try:
        return ValidatorConfig.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: ValidatorConfig) -> Path:
    """Write *config* to the global config file and return its path."""
    path = global_config_path()
    _atomic_write(path, json.dumps(config.model_dump(mode="json"), indent=2) + "\n")
    return path


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./oasvalidator.json`` as a raw dict, or ``None`` if absent.

    The dict is not validated on its own; it is merged over the global
    settings first and the result is validated by :func:`resolve_config`.

    Raises:
        ConfigError: If the file is not a JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    return _read_json_object(path, "project")


# --- Resolution ---


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def resolve_config(
    cli_enforce: Optional[bool] = None,
    cli_format: Optional[str] = None,
) -> ValidatorConfig:
    """Combine every configuration layer into the effective settings.

    Precedence (high to low):
        1. CLI flags (``cli_enforce``, ``cli_format``)
        2. ``OASVALIDATOR_ENFORCE`` and ``OASVALIDATOR_FORMAT``
        3. ``./oasvalidator.json``
        4. The global ``config.json``
        5. Defaults

    Raises:
        ConfigError: If a file or environment value is invalid, or the
            merged result fails validation.
    """
    data = load_global_config().model_dump(mode="json")

    project = load_project_config()
    if project is not None:
        data = _deep_merge(data, project)

    overrides: dict[str, Any] = {}
    env_enforce = os.environ.get(ENV_ENFORCE)
    if env_enforce is not None:
        overrides["enforce"] = _parse_bool(ENV_ENFORCE, env_enforce)
    if os.environ.get(ENV_FORMAT):
        overrides["output"] = {"format": os.environ[ENV_FORMAT]}
    if cli_enforce is not None:
        overrides["enforce"] = cli_enforce
    if cli_format is not None:
        overrides["output"] = {"format": cli_format}
    data = _deep_merge(data, overrides)

    try:
        return ValidatorConfig.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

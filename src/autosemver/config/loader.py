"""Configuration loading.

Lookup order for :func:`load_config`:

1. an explicit ``config_file``;
2. ``.autosemver.toml`` in the project directory;
3. ``[tool.autosemver]`` of the nearest ``pyproject.toml``;
4. built-in defaults.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from autosemver.config.models import AutoSemverConfig
from autosemver.exceptions import ConfigNotFoundError, ConfigValidationError
from autosemver.logging import get_logger

log = get_logger(__name__)

CONFIG_FILE_NAME = ".autosemver.toml"
TOOL_KEY = "autosemver"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find the nearest pyproject.toml, from ``start`` up to the filesystem root.

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found.
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file.

    Raises:
        ConfigNotFoundError: If the file does not exist.
        ConfigValidationError: If the file is not valid TOML.
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"Configuration file not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_autosemver_config(data: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.autosemver]`` table, or an empty dict."""
    section = data.get("tool", {}).get(TOOL_KEY, {})
    return dict(section)


def parse_config(data: dict[str, Any], *, source: str = "<config>") -> AutoSemverConfig:
    """Validate raw configuration data.

    Raises:
        ConfigValidationError: If the data does not validate.
    """
    try:
        return AutoSemverConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {source}:\n{e}") from e


def load_config(path: Path | None = None, config_file: Path | None = None) -> AutoSemverConfig:
    """Load configuration for the project at ``path``.

    Args:
        path: Project directory, the current directory by default.
        config_file: Explicit configuration file. For a ``pyproject.toml``
            or any document with a ``[tool]`` table only ``[tool.autosemver]``
            is read (defaults when it is missing), otherwise the whole
            document.

    Returns:
        The validated configuration, defaults when nothing is configured.

    Raises:
        ConfigNotFoundError: If ``config_file`` does not exist.
        ConfigValidationError: If the configuration is invalid.
    """
    project_path = path or Path.cwd()

    if config_file is not None:
        data = load_pyproject_toml(config_file)
        if config_file.name == "pyproject.toml" or "tool" in data:
            data = extract_autosemver_config(data)
        return parse_config(data, source=str(config_file))

    standalone = project_path / CONFIG_FILE_NAME
    if standalone.is_file():
        return parse_config(load_pyproject_toml(standalone), source=str(standalone))

    try:
        pyproject_path = find_pyproject_toml(project_path)
    except ConfigNotFoundError:
        log.debug("no_config_found", path=str(project_path))
        return AutoSemverConfig()

    section = extract_autosemver_config(load_pyproject_toml(pyproject_path))
    log.debug("config_loaded", source=str(pyproject_path), configured=bool(section))
    return parse_config(section, source=str(pyproject_path))

"""Configuration loading from pyproject.toml."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from smart_release.config.models import SmartReleaseConfig
from smart_release.exceptions import ConfigNotFoundError, ConfigValidationError

TOOL_NAME = "smart-release"


def find_pyproject_toml(start: Path | None = None) -> Path:
    """Find the nearest pyproject.toml, searching upwards from start.

    Raises:
        ConfigNotFoundError: If no pyproject.toml exists up to the filesystem root
    """
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(f"No pyproject.toml found in {current} or its parents")


def load_pyproject_toml(path: Path) -> dict[str, Any]:
    """Parse a pyproject.toml file.

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigValidationError: If the file is not valid TOML
    """
    if not path.is_file():
        raise ConfigNotFoundError(f"File not found: {path}")
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigValidationError(f"Invalid TOML in {path}: {e}") from e


def extract_smart_release_config(pyproject: dict[str, Any]) -> dict[str, Any]:
    """Return the ``[tool.smart-release]`` table, or an empty dict."""
    return pyproject.get("tool", {}).get(TOOL_NAME, {})


def load_config(path: Path | None = None) -> SmartReleaseConfig:
    """Load and validate configuration.

    Args:
        path: Directory to start searching from (defaults to cwd)

    Raises:
        ConfigNotFoundError: If no pyproject.toml is found
        ConfigValidationError: If the configuration is invalid
    """
    pyproject_path = find_pyproject_toml(path)
    data = extract_smart_release_config(load_pyproject_toml(pyproject_path))
    try:
        return SmartReleaseConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {pyproject_path}:\n{e}") from e


def get_project_name(path: Path) -> str:
    """Get ``[project].name`` from a pyproject.toml or its directory.

    Raises:
        ConfigValidationError: If the name is missing
    """
    pyproject_path = path / "pyproject.toml" if path.is_dir() else path
    project = load_pyproject_toml(pyproject_path).get("project", {})
    name = project.get("name")
    if not name:
        raise ConfigValidationError(f"Missing [project].name in {pyproject_path}")
    return str(name)

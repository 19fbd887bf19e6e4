"""Configuration loading for codeintel.

Reads settings *only* from pyproject.toml under the [tool.codeintel] section.
Callers supply their own defaults for missing keys; a missing file or section
yields an empty configuration, never an error.

codeintel/src/codeintel/config.py
"""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

if sys.version_info >= (3, 11):

    import tomllib
else:

    try:

        import tomli as tomllib
    except ImportError as e:

        raise ImportError(
            "codeintel requires Python 3.11+ or the 'tomli' package "
            "to parse pyproject.toml on Python 3.10. "
            "Hint: Try running: pip install tomli"
        ) from e

logger = logging.getLogger(__name__)

__all__ = ["Config", "load_config", "walk_up_for_config"]

SettingValue = Union[str, bool, int, float, list, dict]


def walk_up_for_config(start_path: Path) -> Path | None:
    """Return the nearest directory at or above start_path holding a pyproject.toml."""
    current = start_path.resolve()
    if current.is_file():
        current = current.parent
    for candidate in [current, *current.parents]:
        if (candidate / "pyproject.toml").is_file():
            return candidate
    return None


class Config:
    """Holds the codeintel configuration loaded from pyproject.toml.

    Attributes:
    project_root: The directory containing the pyproject.toml that was read,
    or None if none was found.
    settings: A read-only view of the [tool.codeintel] table. Empty if the
    file or section is missing or invalid.
    """

    def __init__(self, project_root: Path | None, config_dict: dict[str, Any]):
        self._project_root = project_root
        self._config_dict = dict(config_dict)

    @property
    def project_root(self) -> Path | None:
        return self._project_root

    @property
    def settings(self) -> Mapping[str, SettingValue]:
        """Read-only view of the settings loaded from [tool.codeintel]."""
        return self._config_dict

    def get(self, key: str, default: SettingValue | None = None) -> SettingValue | None:
        """Gets a value from the loaded settings, returning default if not found."""
        return self._config_dict.get(key, default)

    def __getitem__(self, key: str) -> SettingValue:
        if key not in self._config_dict:
            raise KeyError(
                f"Required configuration key '{key}' not found in "
                f"[tool.codeintel] section of pyproject.toml."
            )
        return self._config_dict[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config_dict

    def is_present(self) -> bool:
        """Checks if a project root was found and some settings were loaded."""
        return self._project_root is not None and bool(self._config_dict)

    def __repr__(self) -> str:
        return f"Config(project_root={self._project_root!r}, keys={sorted(self._config_dict)!r})"


def load_config(start_path: Path) -> Config:
    """Loads codeintel configuration from the nearest pyproject.toml.

    Args:
    start_path: The file or directory to start searching upwards from.

    Returns:
    A Config object; empty when no file or no [tool.codeintel] table is found.
    """
    project_root = walk_up_for_config(start_path)
    loaded_settings: dict[str, Any] = {}

    if not project_root:
        logger.debug(
            f"Could not find pyproject.toml searching from '{start_path}'. "
            "No configuration will be loaded."
        )
        return Config(project_root=None, config_dict=loaded_settings)

    pyproject_path = project_root / "pyproject.toml"
    logger.debug(f"Attempting to load config from: {pyproject_path}")

    try:
        with open(pyproject_path, "rb") as f:
            full_toml_config = tomllib.load(f)

        tool_section = full_toml_config.get("tool")
        if not isinstance(tool_section, dict):
            logger.debug(f"{pyproject_path} has no [tool] section")
            codeintel_config = {}
        else:
            codeintel_config = tool_section.get("codeintel", {})

        if isinstance(codeintel_config, dict):
            loaded_settings = codeintel_config
            if loaded_settings:
                logger.debug(f"Loaded [tool.codeintel] settings from {pyproject_path}")
            else:
                logger.debug(f"Found {pyproject_path}, but the [tool.codeintel] section is empty or missing.")
        else:
            logger.warning(
                f"[tool.codeintel] section in {pyproject_path} is not a valid table (dictionary). "
                "Ignoring this section."
            )

    except tomllib.TOMLDecodeError as e:
        logger.error(f"Error parsing {pyproject_path}: {e}. Using empty configuration.")
    except OSError as e:
        logger.error(f"Error reading {pyproject_path}: {e}. Using empty configuration.")

    return Config(project_root=project_root, config_dict=loaded_settings)

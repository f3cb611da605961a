"""Layered compiler configuration.

Settings are merged from, lowest precedence first:
1. CompilerSettings defaults
2. User config: scriptlib.yaml in $SCRIPTLIB_CONFIG_DIR, else $SCRIPTLIB_HOME/config
3. Project config: .scriptlib.yaml in the script working directory
4. SCRIPTLIB_* environment variables

Contract:
- Inputs: Config file paths, working directory, environment variables
- Outputs: CompilerSettings objects
- Side Effects: None; missing files contribute nothing
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .settings import CompilerSettings

logger = logging.getLogger(__name__)

ENV_PREFIX = "SCRIPTLIB_"
CONFIG_FILENAME = "scriptlib.yaml"
PROJECT_CONFIG_FILENAME = ".scriptlib.yaml"


def get_home_dir() -> Path:
    """Get SCRIPTLIB_HOME.

    Returns:
        Path from SCRIPTLIB_HOME, or ~/.scriptlib when unset
    """
    root = os.environ.get(f"{ENV_PREFIX}HOME")
    if root:
        return Path(root).resolve()
    return Path.home() / ".scriptlib"


def get_config_path() -> Path:
    """Get path of the user config file.

    Environment Variables:
        SCRIPTLIB_CONFIG_DIR: Directory holding scriptlib.yaml
        (falls back to $SCRIPTLIB_HOME/config if not set)

    Example:
        >>> config_path = get_config_path()
        >>> assert config_path.name == "scriptlib.yaml"
    """
    override = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    config_dir = Path(override).resolve() if override else get_home_dir() / "config"
    return config_dir / CONFIG_FILENAME


def read_config_file(path: Path) -> dict[str, Any]:
    """Read the settings of one YAML config layer.

    Unreadable, malformed or non-mapping files log a warning and contribute
    no settings. Keys CompilerSettings does not define are dropped with a warning.

    Args:
        path: YAML file path

    Returns:
        Known settings found in the file
    """
    if not path.is_file():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {path}: {e}")
        return {}

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: expected a mapping, got {type(data).__name__}")
        return {}

    known = CompilerSettings.model_fields
    unknown = sorted(str(key) for key in data if key not in known)
    if unknown:
        logger.warning(f"Ignoring unknown settings in {path}: {', '.join(unknown)}")

    logger.debug(f"Loaded config from {path}")
    return {key: value for key, value in data.items() if key in known}


def load_config(config_path: Path | None = None, working_directory: Path | str | None = None) -> CompilerSettings:
    """Load compiler configuration from YAML layers and environment.

    Args:
        config_path: User config file (default: get_config_path())
        working_directory: Script directory whose .scriptlib.yaml overrides the user config

    Returns:
        Validated compiler settings

    Example:
        >>> settings = load_config(working_directory="my-script")
        >>> assert isinstance(settings, CompilerSettings)
    """
    layers = [config_path or get_config_path()]
    if working_directory is not None:
        layers.append(Path(working_directory) / PROJECT_CONFIG_FILENAME)

    file_settings: dict[str, Any] = {}
    for layer in layers:
        file_settings.update(read_config_file(layer))

    # Init kwargs outrank the environment in pydantic-settings
    file_settings = {key: value for key, value in file_settings.items() if f"{ENV_PREFIX}{key.upper()}" not in os.environ}

    settings = CompilerSettings(**file_settings)
    logger.info(
        f"Compiler configuration loaded: configuration={settings.configuration}, debug={settings.debug}, "
        f"manifest={settings.manifest_name}, log_level={settings.log_level}"
    )
    return settings

"""Configuration module for script_library.

Provides compiler configuration loading from YAML and environment variables.

Public Interface:
    - CompilerSettings: Settings model
    - load_config: Load layered configuration
    - read_config_file: Read one YAML config layer
    - get_config_path: Get user config file path
    - get_home_dir: Get SCRIPTLIB_HOME
"""

from .loader import get_config_path
from .loader import get_home_dir
from .loader import load_config
from .loader import read_config_file
from .settings import CompilerSettings

__all__ = [
    "CompilerSettings",
    "load_config",
    "read_config_file",
    "get_config_path",
    "get_home_dir",
]

"""Settings models for the script compiler.

This module defines the baseline compilation policy and logging behaviour,
separate from the per-script dependency manifest.

Contract:
- Inputs: Environment variables, YAML files
- Outputs: Validated settings objects
- Side Effects: None (read-only)
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

DEFAULT_IMPORTS = [
    "os",
    "sys",
    "collections",
    "functools",
    "itertools",
    "json",
    "math",
    "pathlib",
    "re",
    "asyncio",
]

DEFAULT_REFERENCES = [
    "builtins",
    "collections",
]

DEFAULT_INHERITED_PREFIXES = [
    "builtins",
    "collections",
    "typing",
    "functools",
    "itertools",
    "abc",
    "types",
    "script_library",
]


class CompilerSettings(BaseSettings):
    """Configuration for the script compiler.

    Attributes:
        configuration: Default manifest profile name (default: Debug)
        debug: Default debug mode for new script contexts
        manifest_name: File name of the dependency manifest in a working directory
        log_level: Logging level (default: info)
        verbose: Emit dependency discovery trace lines
        default_imports: Modules bound into every script namespace
        default_references: Host modules every script compiles against
        inherited_prefixes: Host packages (with their submodules) inherited as references

    Example:
        >>> settings = CompilerSettings()
        >>> assert settings.manifest_name == "script.yaml"
        >>> assert "builtins" in settings.default_references
    """

    model_config = SettingsConfigDict(
        env_prefix="SCRIPTLIB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    configuration: str = "Debug"
    debug: bool = False
    manifest_name: str = "script.yaml"
    log_level: str = "info"
    verbose: bool = False

    default_imports: list[str] = list(DEFAULT_IMPORTS)
    default_references: list[str] = list(DEFAULT_REFERENCES)
    inherited_prefixes: list[str] = list(DEFAULT_INHERITED_PREFIXES)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Lower-case the level and reject names logging does not know.

        Args:
            v: Level name (e.g. "INFO", "debug")

        Returns:
            Lower-cased level name

        Raises:
            ValueError: If the level is not a standard logging level
        """
        level = v.strip().lower()
        if level not in {"debug", "info", "warning", "error", "critical"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("inherited_prefixes")
    @classmethod
    def drop_blank_prefixes(cls, v: list[str]) -> list[str]:
        """A blank prefix would inherit every loaded module."""
        return [prefix for prefix in v if prefix.strip()]

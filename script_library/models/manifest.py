"""Dependency manifest models.

Two layers live here:
- Pydantic models validating the YAML manifest as written (``script.yaml``)
- Resolved dependency graph values handed to the asset resolver

Contract:
- Inputs: Parsed YAML mappings
- Outputs: Validated manifest models and immutable graph nodes
- Side Effects: None (pure data structures)
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

# =============================================================================
# Manifest Models (as written)
# =============================================================================


class LibraryDefinition(BaseModel):
    """A library a script may depend on.

    Attributes:
        version: Informational version string
        path: Base directory of the library, relative to the manifest
        assets: Default runtime assets, relative to ``path``
        runtimes: Platform-specific runtime assets keyed by runtime identifier
        dependencies: Names of other libraries this one needs
    """

    model_config = ConfigDict(extra="forbid")

    version: str = Field(default="0.0.0", description="Library version")
    path: str = Field(default=".", description="Base directory relative to the manifest")
    assets: list[str] = Field(default_factory=list, description="Default runtime assets")
    runtimes: dict[str, list[str]] = Field(default_factory=dict, description="Runtime-specific assets")
    dependencies: list[str] = Field(default_factory=list, description="Library dependencies")

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: object) -> object:
        # YAML reads unquoted 1.0 as a float
        return str(v) if isinstance(v, int | float) else v


class ProfileDefinition(BaseModel):
    """Named configuration profile (e.g. Debug, Release)."""

    model_config = ConfigDict(extra="forbid")

    dependencies: list[str] = Field(default_factory=list, description="Profile-only dependencies")


class ScriptManifest(BaseModel):
    """Root of a ``script.yaml`` manifest.

    Example:
        >>> manifest = ScriptManifest.model_validate({
        ...     "name": "demo",
        ...     "dependencies": ["a"],
        ...     "libraries": {"a": {"assets": ["src"]}},
        ... })
        >>> manifest.dependencies_for("Debug")
        ['a']
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="script", description="Project name")
    dependencies: list[str] = Field(default_factory=list, description="Dependencies shared by every profile")
    profiles: dict[str, ProfileDefinition] | None = Field(default=None, description="Named profiles")
    libraries: dict[str, LibraryDefinition] = Field(default_factory=dict, description="Declared libraries")

    @field_validator("profiles", mode="before")
    @classmethod
    def empty_profiles(cls, v: object) -> object:
        # "Release:" with no body parses as None
        if isinstance(v, dict):
            return {name: body or {} for name, body in v.items()}
        return v

    @field_validator("libraries", mode="before")
    @classmethod
    def empty_libraries(cls, v: object) -> object:
        if isinstance(v, dict):
            return {name: body or {} for name, body in v.items()}
        return v or {}

    def has_profile(self: ScriptManifest, configuration: str) -> bool:
        return self.profiles is None or configuration in self.profiles

    def dependencies_for(self: ScriptManifest, configuration: str) -> list[str]:
        """Root dependency names for a profile, shared ones first."""
        names = list(self.dependencies)
        if self.profiles and configuration in self.profiles:
            names.extend(self.profiles[configuration].dependencies)
        return list(dict.fromkeys(names))


# =============================================================================
# Dependency Graph (resolved)
# =============================================================================


@dataclass(frozen=True)
class RuntimeAssetGroup:
    """Runtime assets applicable to one runtime identifier.

    An empty ``runtime`` marks the default group, used on every platform.
    """

    runtime: str
    assets: tuple[Path, ...]

    @property
    def is_default(self: RuntimeAssetGroup) -> bool:
        return not self.runtime


@dataclass(frozen=True)
class DependencyNode:
    """A library in the resolved dependency graph."""

    name: str
    version: str
    runtime_asset_groups: tuple[RuntimeAssetGroup, ...]

    def get_default_assets(self: DependencyNode) -> tuple[Path, ...]:
        for group in self.runtime_asset_groups:
            if group.is_default:
                return group.assets
        return ()

    def get_runtime_assets(self: DependencyNode, runtime: str) -> tuple[Path, ...]:
        assets: list[Path] = []
        for group in self.runtime_asset_groups:
            if not group.is_default and group.runtime == runtime:
                assets.extend(group.assets)
        return tuple(assets)


@dataclass(frozen=True)
class DependencyGraph:
    """Transitive dependencies of a manifest profile."""

    manifest_path: Path
    configuration: str
    nodes: tuple[DependencyNode, ...] = ()

    def __iter__(self: DependencyGraph):
        return iter(self.nodes)

    def __len__(self: DependencyGraph) -> int:
        return len(self.nodes)

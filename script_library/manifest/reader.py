"""Dependency manifest reader.

Reads ``script.yaml`` from a script's working directory and expands a
profile's dependencies into the transitive dependency graph.

Contract:
- Inputs: Working directory, profile name
- Outputs: DependencyGraph with absolute asset paths
- Side Effects: None (read-only discovery)
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..errors import ResolutionError
from ..models.manifest import DependencyGraph
from ..models.manifest import DependencyNode
from ..models.manifest import LibraryDefinition
from ..models.manifest import RuntimeAssetGroup
from ..models.manifest import ScriptManifest

logger = logging.getLogger(__name__)


class ManifestReader:
    """Reads dependency manifests from working directories.

    Example:
        >>> reader = ManifestReader()
        >>> graph = reader.read_graph(Path("scripts/hello"), "Debug")
        >>> [node.name for node in graph]
        ['shared-lib', 'other-lib']
    """

    def __init__(self: "ManifestReader", manifest_name: str = "script.yaml") -> None:
        """Initialize reader.

        Args:
            manifest_name: Manifest file name looked up in working directories
        """
        self.manifest_name = manifest_name

    def find_manifest(self: "ManifestReader", working_directory: Path) -> Path:
        """Locate the manifest file of a working directory.

        Raises:
            ResolutionError: If the directory or its manifest does not exist
        """
        working_directory = Path(working_directory)
        if not working_directory.is_dir():
            raise ResolutionError(f"Working directory not found: {working_directory}")

        manifest_path = working_directory / self.manifest_name
        if not manifest_path.is_file():
            raise ResolutionError(f"No '{self.manifest_name}' found in {working_directory.resolve()}")
        return manifest_path.resolve()

    def load_manifest(self: "ManifestReader", manifest_path: Path) -> ScriptManifest:
        """Parse and validate a manifest file.

        Raises:
            ResolutionError: If the file can't be read, isn't YAML or fails validation
        """
        try:
            with open(manifest_path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ResolutionError(f"Failed to read manifest {manifest_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ResolutionError(f"Invalid YAML in manifest {manifest_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ResolutionError(f"Manifest {manifest_path} must be a mapping, got {type(data).__name__}")

        try:
            return ScriptManifest.model_validate(data)
        except ValidationError as e:
            raise ResolutionError(f"Invalid manifest {manifest_path}: {e}") from e

    def read_graph(self: "ManifestReader", working_directory: Path, configuration: str) -> DependencyGraph:
        """Build the transitive dependency graph of a profile.

        Libraries are listed in depth-first discovery order from the
        profile's root dependencies. Each library appears once, so cycles
        and diamonds are safe.

        Args:
            working_directory: Directory containing the manifest
            configuration: Profile name

        Returns:
            DependencyGraph for the profile

        Raises:
            ResolutionError: If the manifest is missing/invalid, the profile is
                unknown, or a dependency names an undeclared library
        """
        manifest_path = self.find_manifest(working_directory)
        manifest = self.load_manifest(manifest_path)

        if not manifest.has_profile(configuration):
            available = ", ".join(sorted(manifest.profiles or {})) or "none"
            raise ResolutionError(
                f"Profile '{configuration}' not found in {manifest_path}. Available profiles: {available}"
            )

        base_dir = manifest_path.parent
        nodes: list[DependencyNode] = []
        visited: set[str] = set()

        def visit(name: str, required_by: str) -> None:
            if name in visited:
                return
            library = manifest.libraries.get(name)
            if library is None:
                raise ResolutionError(f"Dependency '{name}' required by {required_by} is not declared in {manifest_path}")
            visited.add(name)
            nodes.append(self._create_node(name, library, base_dir))
            for dependency in library.dependencies:
                visit(dependency, f"'{name}'")

        for root in manifest.dependencies_for(configuration):
            visit(root, f"profile '{configuration}'")

        logger.debug(f"Resolved {len(nodes)} libraries for profile '{configuration}' from {manifest_path}")
        return DependencyGraph(manifest_path=manifest_path, configuration=configuration, nodes=tuple(nodes))

    @staticmethod
    def _create_node(name: str, library: LibraryDefinition, base_dir: Path) -> DependencyNode:
        library_dir = (base_dir / library.path).resolve()

        groups = [RuntimeAssetGroup(runtime="", assets=tuple((library_dir / a).resolve() for a in library.assets))]
        for runtime, assets in library.runtimes.items():
            groups.append(RuntimeAssetGroup(runtime=runtime, assets=tuple((library_dir / a).resolve() for a in assets)))

        return DependencyNode(name=name, version=library.version, runtime_asset_groups=tuple(groups))

"""Runtime asset resolution.

Collects the files a script needs at runtime from the dependency graph of
its working directory.

Contract:
- Inputs: Working directory, profile name, runtime identifier
- Outputs: RuntimeAssetSet of unique absolute paths
- Side Effects: Reads the dependency manifest
"""

from collections.abc import Iterator
from pathlib import Path

from ..logger import ScriptLogger
from ..manifest.reader import ManifestReader
from ..runtime.platform import RuntimeIdentifier
from ..runtime.platform import get_runtime_identifier


class RuntimeAssetSet:
    """Unique runtime asset paths in discovery order.

    Example:
        >>> assets = RuntimeAssetSet()
        >>> assets.add(Path("/libs/a"))
        True
        >>> assets.add(Path("/libs/a"))
        False
        >>> len(assets)
        1
    """

    def __init__(self: "RuntimeAssetSet") -> None:
        self._paths: dict[Path, None] = {}

    def add(self: "RuntimeAssetSet", path: Path) -> bool:
        """Add a path; returns False if it was already present."""
        path = Path(path)
        if path in self._paths:
            return False
        self._paths[path] = None
        return True

    def __contains__(self: "RuntimeAssetSet", path: object) -> bool:
        return path in self._paths

    def __iter__(self: "RuntimeAssetSet") -> Iterator[Path]:
        return iter(self._paths)

    def __len__(self: "RuntimeAssetSet") -> int:
        return len(self._paths)

    def __repr__(self: "RuntimeAssetSet") -> str:
        return f"RuntimeAssetSet({[str(p) for p in self._paths]})"


class RuntimeAssetResolver:
    """Resolves default and platform-specific runtime assets of a working directory."""

    def __init__(self: "RuntimeAssetResolver", reader: ManifestReader, logger: ScriptLogger) -> None:
        """Initialize resolver.

        Args:
            reader: Manifest reader producing dependency graphs
            logger: Sink for discovery trace lines
        """
        self.reader = reader
        self.logger = logger

    def resolve(
        self: "RuntimeAssetResolver",
        working_directory: Path,
        configuration: str,
        runtime_identifier: RuntimeIdentifier | str | None = None,
    ) -> RuntimeAssetSet:
        """Resolve every runtime asset of a profile.

        Default assets of every library are added first, then the assets of
        every group tagged with ``runtime_identifier``. Both contribute to
        the same set, so a library may provide a default and a platform
        asset, and a file reached through several libraries appears once.

        Args:
            working_directory: Directory containing the manifest
            configuration: Profile name
            runtime_identifier: Platform tag (default: current host)

        Returns:
            Resolved asset set

        Raises:
            ResolutionError: If no dependency graph can be read
        """
        runtime = str(runtime_identifier or get_runtime_identifier())
        graph = self.reader.read_graph(working_directory, configuration)
        self.logger.verbose(f"Found runtime context for '{graph.manifest_path}'.")

        assets = RuntimeAssetSet()

        for node in graph:
            for asset_path in node.get_default_assets():
                self.logger.verbose(f"Discovered runtime dependency for '{asset_path}'")
                assets.add(asset_path)

        for node in graph:
            for group in node.runtime_asset_groups:
                if group.is_default or group.runtime != runtime:
                    continue
                for asset_path in group.assets:
                    self.logger.verbose(f"Discovered runtime asset dependency ('{runtime}') for '{asset_path}'")
                    assets.add(asset_path)

        return assets

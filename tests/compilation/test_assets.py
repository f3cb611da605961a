"""
Unit tests for runtime asset resolution.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from script_library.compilation import RuntimeAssetResolver
from script_library.compilation import RuntimeAssetSet
from script_library.errors import ResolutionError
from script_library.logger import ScriptLogger
from script_library.manifest import ManifestReader
from script_library.runtime import RuntimeIdentifier

WriteManifest = Callable[[dict[str, Any]], Path]


@pytest.fixture
def resolver(script_logger: ScriptLogger) -> RuntimeAssetResolver:
    return RuntimeAssetResolver(ManifestReader(), script_logger)


@pytest.mark.unit
class TestRuntimeAssetSet:
    def test_add_deduplicates(self) -> None:
        assets = RuntimeAssetSet()

        assert assets.add(Path("/a")) is True
        assert assets.add(Path("/a")) is False
        assert assets.add(Path("/b")) is True

        assert list(assets) == [Path("/a"), Path("/b")]
        assert Path("/a") in assets
        assert len(assets) == 2


@pytest.mark.unit
class TestRuntimeAssetResolver:
    def test_union_of_default_and_platform_assets(
        self, resolver: RuntimeAssetResolver, write_manifest: WriteManifest, working_dir: Path
    ) -> None:
        write_manifest(
            {
                "dependencies": ["a", "b"],
                "libraries": {
                    "a": {"path": "a", "assets": ["lib"], "runtimes": {"linux": ["linux"], "win": ["win"]}},
                    "b": {"path": "b", "assets": ["lib", "extra"], "runtimes": {"osx": ["osx"]}},
                },
            }
        )

        assets = resolver.resolve(working_dir, "Debug", RuntimeIdentifier.LINUX)
        root = working_dir.resolve()

        assert set(assets) == {root / "a" / "lib", root / "a" / "linux", root / "b" / "lib", root / "b" / "extra"}

    def test_platform_assets_are_additive(
        self, resolver: RuntimeAssetResolver, write_manifest: WriteManifest, working_dir: Path
    ) -> None:
        write_manifest({"dependencies": ["a"], "libraries": {"a": {"assets": ["lib"], "runtimes": {"osx": ["osx"]}}}})

        assets = resolver.resolve(working_dir, "Debug", "osx")

        assert [p.name for p in assets] == ["lib", "osx"]

    def test_shared_asset_appears_once(
        self, resolver: RuntimeAssetResolver, write_manifest: WriteManifest, working_dir: Path
    ) -> None:
        write_manifest(
            {
                "dependencies": ["left", "right"],
                "libraries": {
                    "left": {"assets": ["shared/common"]},
                    "right": {"path": "shared", "assets": ["common"], "runtimes": {"linux": ["../shared/common"]}},
                },
            }
        )

        assets = resolver.resolve(working_dir, "Debug", RuntimeIdentifier.LINUX)

        assert list(assets) == [(working_dir / "shared" / "common").resolve()]

    def test_empty_graph(self, resolver: RuntimeAssetResolver, empty_manifest: Path, working_dir: Path) -> None:
        assert len(resolver.resolve(working_dir, "Debug", RuntimeIdentifier.WINDOWS)) == 0

    def test_missing_manifest(self, resolver: RuntimeAssetResolver, working_dir: Path) -> None:
        with pytest.raises(ResolutionError):
            resolver.resolve(working_dir, "Debug")

    def test_logs_each_discovered_asset(
        self,
        resolver: RuntimeAssetResolver,
        write_manifest: WriteManifest,
        working_dir: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        write_manifest({"dependencies": ["a"], "libraries": {"a": {"assets": ["lib"], "runtimes": {"win": ["win"]}}}})

        with caplog.at_level("DEBUG", logger="script_library.tests"):
            resolver.resolve(working_dir, "Debug", RuntimeIdentifier.WINDOWS)

        assert "Discovered runtime dependency for" in caplog.text
        assert "Discovered runtime asset dependency ('win')" in caplog.text

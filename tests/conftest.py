"""
Shared pytest fixtures for script_library test suite.

Provides fixtures for:
- Temporary SCRIPTLIB_HOME directories
- Script working directories with manifests and library files
- Compilers with isolated loggers
"""

import logging
import tempfile
from collections.abc import Callable
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import yaml

from script_library.compilation import ScriptCompiler
from script_library.logger import ScriptLogger
from script_library.models import ScriptContext
from script_library.models import ScriptSource
from script_library.runtime import RuntimeIdentifier


@pytest.fixture(autouse=True)
def restore_package_log_level() -> Generator[None, None, None]:
    """Undo log level changes made by configure_logging."""
    package_logger = logging.getLogger("script_library")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def temp_storage_dir() -> Generator[Path, None, None]:
    """Create temporary storage directory for tests.

    Automatically cleaned up after test completes.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_storage_env(temp_storage_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point SCRIPTLIB_HOME at a temp directory.

    Also clears SCRIPTLIB_* overrides so settings come from files and defaults.
    """
    monkeypatch.setenv("SCRIPTLIB_HOME", str(temp_storage_dir))
    monkeypatch.delenv("SCRIPTLIB_CONFIG_DIR", raising=False)
    for key in ("CONFIGURATION", "DEBUG", "MANIFEST_NAME", "LOG_LEVEL", "VERBOSE", "DEFAULT_IMPORTS", "INHERITED_PREFIXES"):
        monkeypatch.delenv(f"SCRIPTLIB_{key}", raising=False)
    return temp_storage_dir


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Empty script working directory."""
    directory = tmp_path / "script"
    directory.mkdir()
    return directory


@pytest.fixture
def write_manifest(working_dir: Path) -> Callable[[dict[str, Any]], Path]:
    """Write script.yaml into the working directory.

    Example:
        >>> def test_manifest(write_manifest):
        ...     path = write_manifest({"dependencies": []})
        ...     assert path.name == "script.yaml"
    """

    def _write(data: dict[str, Any], name: str = "script.yaml") -> Path:
        path = working_dir / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_package(working_dir: Path) -> Callable[..., Path]:
    """Create an importable package below the working directory.

    Returns the directory that must go on the import path.
    """

    def _make(asset_dir: str, package: str, body: str = "VALUE = 1\n") -> Path:
        root = working_dir / asset_dir
        package_dir = root / package
        package_dir.mkdir(parents=True, exist_ok=True)
        (package_dir / "__init__.py").write_text(body, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def empty_manifest(write_manifest: Callable[[dict[str, Any]], Path]) -> Path:
    """Manifest without dependencies."""
    return write_manifest({"name": "empty"})


@pytest.fixture
def script_logger() -> ScriptLogger:
    """Verbose logger on the script_library logger."""
    return ScriptLogger(logging.getLogger("script_library.tests"), verbose=True)


@pytest.fixture
def compiler(script_logger: ScriptLogger) -> ScriptCompiler:
    """Compiler pinned to the linux runtime identifier."""
    return ScriptCompiler(script_logger, runtime_identifier=RuntimeIdentifier.LINUX)


@pytest.fixture
def make_context(working_dir: Path) -> Callable[..., ScriptContext]:
    """Build a ScriptContext for source text in the working directory."""

    def _make(text: str, **kwargs: Any) -> ScriptContext:
        encoding = kwargs.pop("encoding", "utf-8")
        return ScriptContext(ScriptSource(text, encoding=encoding), working_directory=working_dir, **kwargs)

    return _make

"""Compilation references and directive resolvers.

A script compiles against two kinds of references:
- ModuleReference: a module object already loaded in the host process
- FileReference: a file or directory placed on the import path while the script runs

Resolvers turn the relative paths of ``#load`` and ``#r`` directives into
absolute paths.
"""

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from types import ModuleType


@dataclass(frozen=True)
class ModuleReference:
    """Reference to an in-memory host module, identified by its name."""

    name: str
    module: ModuleType = field(compare=False, repr=False)

    @classmethod
    def from_module(cls, module: ModuleType) -> "ModuleReference":
        return cls(name=module.__name__, module=module)

    @property
    def top_level(self: "ModuleReference") -> str:
        return self.name.split(".", 1)[0]

    def __str__(self: "ModuleReference") -> str:
        return self.name


@dataclass(frozen=True)
class FileReference:
    """Reference to a runtime asset on disk."""

    path: Path

    def __post_init__(self: "FileReference") -> None:
        object.__setattr__(self, "path", Path(self.path))

    def exists(self: "FileReference") -> bool:
        return self.path.exists()

    def __str__(self: "FileReference") -> str:
        return str(self.path)


Reference = ModuleReference | FileReference


@dataclass(frozen=True)
class _PathResolver:
    """Resolves directive paths.

    Relative paths are tried against the directory of the file containing
    the directive, then ``base_directory``, then each search path. The
    first candidate that exists wins.
    """

    base_directory: Path | None = None
    search_paths: tuple[Path, ...] = ()

    def _accepts(self: "_PathResolver", candidate: Path) -> bool:
        return candidate.exists()

    def resolve(self: "_PathResolver", path: str, base_file_path: str | None = None) -> Path | None:
        """Resolve a directive path.

        Args:
            path: Path as written in the directive
            base_file_path: File the directive appears in, if any

        Returns:
            Absolute path, or None if nothing matches
        """
        requested = Path(path).expanduser()
        if requested.is_absolute():
            return requested.resolve() if self._accepts(requested) else None

        bases: list[Path] = []
        if base_file_path:
            bases.append(Path(base_file_path).parent)
        if self.base_directory is not None:
            bases.append(self.base_directory)
        bases.extend(self.search_paths)

        for base in bases:
            candidate = base / requested
            if self._accepts(candidate):
                return candidate.resolve()
        return None


@dataclass(frozen=True)
class SourceFileResolver(_PathResolver):
    """Resolves ``#load "file.py"`` directives to script files."""

    def _accepts(self: "SourceFileResolver", candidate: Path) -> bool:
        return candidate.is_file()


@dataclass(frozen=True)
class MetadataResolver(_PathResolver):
    """Resolves ``#r "path"`` directives to files or directories."""

"""Immutable compilation configuration.

Contract:
- Inputs: Imports, references, resolvers, debug/encoding settings
- Outputs: CompilationConfiguration values; every change returns a new value
- Side Effects: None
"""

import codecs
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace
from pathlib import Path
from types import ModuleType

from .references import FileReference
from .references import MetadataResolver
from .references import ModuleReference
from .references import Reference
from .references import SourceFileResolver


def _as_reference(value: Reference | ModuleType | Path | str) -> Reference:
    if isinstance(value, ModuleReference | FileReference):
        return value
    if isinstance(value, ModuleType):
        return ModuleReference.from_module(value)
    if isinstance(value, Path | str):
        return FileReference(Path(value))
    raise TypeError(f"Cannot reference {type(value).__name__}: {value!r}")


@dataclass(frozen=True)
class CompilationConfiguration:
    """Build-once settings for a single compilation.

    Attributes:
        imports: Module names bound into the script namespace before it runs
        references: In-memory module references and file references
        source_resolver: Resolves ``#load`` directives
        metadata_resolver: Resolves ``#r`` directives
        emit_debug_information: Compile without optimizations and record a source checksum
        file_encoding: Encoding of the script source
        file_path: Originating file path, used in diagnostics and tracebacks

    Example:
        >>> base = CompilationConfiguration()
        >>> extended = base.add_imports("json").with_emit_debug_information(True)
        >>> base.imports, extended.imports
        ((), ('json',))
    """

    imports: tuple[str, ...] = ()
    references: tuple[Reference, ...] = ()
    source_resolver: SourceFileResolver = field(default_factory=SourceFileResolver)
    metadata_resolver: MetadataResolver = field(default_factory=MetadataResolver)
    emit_debug_information: bool = False
    file_encoding: str = "utf-8"
    file_path: str | None = None

    @property
    def module_references(self: "CompilationConfiguration") -> tuple[ModuleReference, ...]:
        return tuple(r for r in self.references if isinstance(r, ModuleReference))

    @property
    def file_references(self: "CompilationConfiguration") -> tuple[FileReference, ...]:
        return tuple(r for r in self.references if isinstance(r, FileReference))

    def add_imports(self: "CompilationConfiguration", *names: str) -> "CompilationConfiguration":
        return replace(self, imports=tuple(dict.fromkeys((*self.imports, *names))))

    def add_references(
        self: "CompilationConfiguration", *references: Reference | ModuleType | Path | str
    ) -> "CompilationConfiguration":
        """Append references, ignoring ones already present.

        Modules, paths and path strings are wrapped into references.
        """
        added = (_as_reference(r) for r in references)
        return replace(self, references=tuple(dict.fromkeys((*self.references, *added))))

    def with_source_resolver(self: "CompilationConfiguration", resolver: SourceFileResolver) -> "CompilationConfiguration":
        return replace(self, source_resolver=resolver)

    def with_metadata_resolver(self: "CompilationConfiguration", resolver: MetadataResolver) -> "CompilationConfiguration":
        return replace(self, metadata_resolver=resolver)

    def with_emit_debug_information(self: "CompilationConfiguration", emit: bool) -> "CompilationConfiguration":
        return replace(self, emit_debug_information=emit)

    def with_file_encoding(self: "CompilationConfiguration", encoding: str) -> "CompilationConfiguration":
        return replace(self, file_encoding=codecs.lookup(encoding).name)

    def with_file_path(self: "CompilationConfiguration", file_path: str | None) -> "CompilationConfiguration":
        return replace(self, file_path=file_path)

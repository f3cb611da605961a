"""Baseline compilation policy tables."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..config.settings import DEFAULT_IMPORTS
from ..config.settings import DEFAULT_INHERITED_PREFIXES
from ..config.settings import DEFAULT_REFERENCES

if TYPE_CHECKING:
    from ..config.settings import CompilerSettings


@dataclass(frozen=True)
class CompilationPolicy:
    """Tables applied to every script.

    Attributes:
        default_imports: Module names bound into every script namespace
        default_references: Host modules every script compiles against
        inherited_prefixes: Case-insensitive package names whose loaded
            modules (and submodules) are added as references
    """

    default_imports: tuple[str, ...] = tuple(DEFAULT_IMPORTS)
    default_references: tuple[str, ...] = tuple(DEFAULT_REFERENCES)
    inherited_prefixes: tuple[str, ...] = tuple(DEFAULT_INHERITED_PREFIXES)

    @classmethod
    def from_settings(cls, settings: "CompilerSettings") -> "CompilationPolicy":
        return cls(
            default_imports=tuple(settings.default_imports),
            default_references=tuple(settings.default_references),
            inherited_prefixes=tuple(settings.inherited_prefixes),
        )


DEFAULT_POLICY = CompilationPolicy()

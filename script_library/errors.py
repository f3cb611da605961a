"""Exception types raised by script_library."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models.diagnostics import Diagnostic


class ScriptLibraryError(Exception):
    """Base class for script_library errors."""


class ArgumentError(ScriptLibraryError, ValueError):
    """Raised when a caller passes a missing or invalid argument."""


class ResolutionError(ScriptLibraryError):
    """Raised when no dependency graph can be derived from a working directory."""


class CompilationError(ScriptLibraryError):
    """Raised when a script produced one or more error diagnostics.

    Attributes:
        diagnostics: Every diagnostic of the compilation, ordered by
            severity (highest first) then source offset
    """

    def __init__(self: "CompilationError", message: str, diagnostics: Sequence["Diagnostic"]) -> None:
        super().__init__(message)
        self.message = message
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)

    @property
    def errors(self: "CompilationError") -> tuple["Diagnostic", ...]:
        """Only the error-severity diagnostics."""
        from .models.diagnostics import DiagnosticSeverity

        return tuple(d for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR)

    def __str__(self: "CompilationError") -> str:
        if not self.diagnostics:
            return self.message
        return f"{self.message} First error: {self.errors[0] if self.errors else self.diagnostics[0]}"

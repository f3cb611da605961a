"""Compiler diagnostics and their ordering.

Contract:
- Inputs: Diagnostics produced by a compile step
- Outputs: Deterministically ordered diagnostic lists
- Side Effects: None (pure data structures)
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum


class DiagnosticSeverity(IntEnum):
    """Diagnostic severity; higher values rank first."""

    HIDDEN = 0
    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self: "DiagnosticSeverity") -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Diagnostic:
    """A compiler message with severity and source location.

    Attributes:
        severity: Diagnostic severity
        message: Human-readable description
        start: Character offset of the reported span in its source
        code: Diagnostic identifier (e.g. "SL1001")
        file_path: Source the offset refers to, if any
        line: 1-based line of ``start`` (0 when there is no source location)
        column: 1-based column of ``start`` (0 when there is no source location)

    Example:
        >>> d = Diagnostic(DiagnosticSeverity.ERROR, "invalid syntax", start=8, code="SL1001",
        ...                file_path="script.py", line=1, column=9)
        >>> str(d)
        'script.py(1,9): error SL1001: invalid syntax'
    """

    severity: DiagnosticSeverity
    message: str
    start: int = 0
    code: str = ""
    file_path: str | None = None
    line: int = 0
    column: int = 0

    @property
    def is_error(self: "Diagnostic") -> bool:
        return self.severity == DiagnosticSeverity.ERROR

    def __str__(self: "Diagnostic") -> str:
        text = f"{self.severity.label} {self.code}: {self.message}" if self.code else f"{self.severity.label}: {self.message}"
        if self.line:
            return f"{self.file_path or '<script>'}({self.line},{self.column}): {text}"
        if self.file_path:
            return f"{self.file_path}: {text}"
        return text


def _ordering_key(diagnostic: Diagnostic) -> tuple[int, int]:
    return (-int(diagnostic.severity), diagnostic.start)


def order_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    """Sort by severity descending, then by start offset ascending.

    The sort is stable, so diagnostics equal on both keys keep the order the
    compile step reported them in. Sorting an already sorted list is a no-op.

    Args:
        diagnostics: Diagnostics in any order

    Returns:
        New ordered list

    Example:
        >>> warning = Diagnostic(DiagnosticSeverity.WARNING, "w", start=50)
        >>> error = Diagnostic(DiagnosticSeverity.ERROR, "e", start=10)
        >>> [d.message for d in order_diagnostics([warning, error])]
        ['e', 'w']
    """
    return sorted(diagnostics, key=_ordering_key)


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.is_error for d in diagnostics)

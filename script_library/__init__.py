"""Script library.

Compiles Python scripts against the dependencies declared in their working
directory's manifest and the modules of the host process.

Public Interface:
    Modules:
    - compilation: Compilation pipeline
    - manifest: Dependency manifest reading
    - models: Script, diagnostic and manifest data structures
    - config: Configuration loading
    - runtime: Host platform detection
"""

from .compilation import ScriptCompilationContext
from .compilation import ScriptCompiler
from .errors import ArgumentError
from .errors import CompilationError
from .errors import ResolutionError
from .errors import ScriptLibraryError
from .logger import ScriptLogger
from .models import Diagnostic
from .models import DiagnosticSeverity
from .models import ScriptContext
from .models import ScriptSource

__all__ = [
    "ScriptCompiler",
    "ScriptCompilationContext",
    "ScriptLogger",
    "ScriptContext",
    "ScriptSource",
    "Diagnostic",
    "DiagnosticSeverity",
    "ScriptLibraryError",
    "ArgumentError",
    "ResolutionError",
    "CompilationError",
]

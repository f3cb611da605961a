"""Models for script_library."""

from .diagnostics import Diagnostic
from .diagnostics import DiagnosticSeverity
from .diagnostics import order_diagnostics
from .manifest import DependencyGraph
from .manifest import DependencyNode
from .manifest import LibraryDefinition
from .manifest import ProfileDefinition
from .manifest import RuntimeAssetGroup
from .manifest import ScriptManifest
from .scripts import ScriptContext
from .scripts import ScriptSource

__all__ = [
    "Diagnostic",
    "DiagnosticSeverity",
    "order_diagnostics",
    "DependencyGraph",
    "DependencyNode",
    "LibraryDefinition",
    "ProfileDefinition",
    "RuntimeAssetGroup",
    "ScriptManifest",
    "ScriptContext",
    "ScriptSource",
]

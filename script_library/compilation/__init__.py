"""Script compilation pipeline.

Public Interface:
    - ScriptCompiler: Orchestrates resolution, configuration and compilation
    - ScriptCompilationContext: Successful compilation result
    - RuntimeAssetResolver / RuntimeAssetSet: Manifest asset resolution
    - ConfigurationBuilder: Base configuration from a policy
    - InheritedReferenceAugmenter: Host module references
    - CompilationConfiguration: Immutable compile settings
    - CompilationPolicy: Baseline policy tables
    - PythonScriptEngine / Script / ScriptEngine: Compile step
    - InteractiveLoader: Shared state of chained submissions
"""

from .assets import RuntimeAssetResolver
from .assets import RuntimeAssetSet
from .builder import ConfigurationBuilder
from .compiler import ScriptCompilationContext
from .compiler import ScriptCompiler
from .engine import PythonScriptEngine
from .engine import Script
from .engine import ScriptEngine
from .inherited import InheritedReferenceAugmenter
from .loader import InteractiveLoader
from .options import CompilationConfiguration
from .policy import DEFAULT_POLICY
from .policy import CompilationPolicy
from .references import FileReference
from .references import MetadataResolver
from .references import ModuleReference
from .references import SourceFileResolver

__all__ = [
    "ScriptCompiler",
    "ScriptCompilationContext",
    "RuntimeAssetResolver",
    "RuntimeAssetSet",
    "ConfigurationBuilder",
    "InheritedReferenceAugmenter",
    "CompilationConfiguration",
    "CompilationPolicy",
    "DEFAULT_POLICY",
    "PythonScriptEngine",
    "Script",
    "ScriptEngine",
    "InteractiveLoader",
    "FileReference",
    "MetadataResolver",
    "ModuleReference",
    "SourceFileResolver",
]

"""Compilation configuration builder.

Contract:
- Inputs: ScriptContext, CompilationPolicy
- Outputs: Base CompilationConfiguration (no manifest or inherited references yet)
- Side Effects: Imports the policy's default reference modules
"""

import importlib

from ..models.scripts import ScriptContext
from .options import CompilationConfiguration
from .policy import DEFAULT_POLICY
from .policy import CompilationPolicy
from .references import MetadataResolver
from .references import ModuleReference
from .references import SourceFileResolver


class ConfigurationBuilder:
    """Builds the base configuration of a script from a fixed policy.

    Example:
        >>> from pathlib import Path
        >>> from script_library.models import ScriptSource
        >>> builder = ConfigurationBuilder()
        >>> context = ScriptContext(ScriptSource("1 + 1"), working_directory=Path("."), debug_mode=True)
        >>> builder.build(context).emit_debug_information
        True
    """

    def __init__(self: "ConfigurationBuilder", policy: CompilationPolicy = DEFAULT_POLICY) -> None:
        self.policy = policy

    def build(self: "ConfigurationBuilder", context: ScriptContext) -> CompilationConfiguration:
        """Create the configuration for a script context.

        Args:
            context: Compilation request

        Returns:
            Configuration with default imports/references, resolvers rooted at the
            working directory, and the context's debug, encoding and file path
        """
        base_directory = context.working_directory.resolve()
        references = [ModuleReference.from_module(importlib.import_module(name)) for name in self.policy.default_references]

        configuration = (
            CompilationConfiguration()
            .add_imports(*self.policy.default_imports)
            .add_references(*references)
            .with_source_resolver(SourceFileResolver(base_directory=base_directory))
            .with_metadata_resolver(MetadataResolver(base_directory=base_directory))
            .with_emit_debug_information(context.debug_mode)
            .with_file_encoding(context.source.encoding)
        )

        if context.file_path and context.file_path.strip():
            configuration = configuration.with_file_path(context.file_path)

        return configuration

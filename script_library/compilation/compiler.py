"""Script compilation orchestrator.

Compiles a script against the runtime assets of its working directory and
the modules the host process already runs.

Stages:
1. Detect the host runtime identifier
2. Resolve runtime assets from the dependency manifest
3. Build the base configuration from the policy
4. Inherit host module references
5. Add runtime assets as file references
6. Compile and triage diagnostics

Contract:
- Inputs: ScriptContext, return type, host type, optional loader from a previous compilation
- Outputs: ScriptCompilationContext ready to run
- Side Effects: Reads the manifest; logs traces and, on failure, every diagnostic
"""

import logging
from pathlib import Path
from typing import Any
from typing import Generic
from typing import TypeVar

from ..config.loader import load_config
from ..config.settings import CompilerSettings
from ..errors import ArgumentError
from ..errors import CompilationError
from ..logger import ScriptLogger
from ..logger import configure_logging
from ..manifest.reader import ManifestReader
from ..models.diagnostics import Diagnostic
from ..models.diagnostics import has_errors
from ..models.diagnostics import order_diagnostics
from ..models.scripts import ScriptContext
from ..models.scripts import ScriptSource
from ..runtime.platform import RuntimeIdentifier
from ..runtime.platform import get_runtime_identifier
from .assets import RuntimeAssetResolver
from .builder import ConfigurationBuilder
from .engine import COMPILATION_FAILED
from .engine import PythonScriptEngine
from .engine import Script
from .engine import ScriptEngine
from .inherited import InheritedReferenceAugmenter
from .loader import InteractiveLoader
from .options import CompilationConfiguration
from .policy import DEFAULT_POLICY
from .policy import CompilationPolicy
from .references import FileReference

logger = logging.getLogger(__name__)

TReturn = TypeVar("TReturn")


class ScriptCompilationContext(Generic[TReturn]):
    """A successfully compiled script.

    Attributes:
        script: Compiled script
        source: Source it was compiled from
        loader: Loader to pass to the next compilation of the same session
    """

    def __init__(
        self: "ScriptCompilationContext[TReturn]",
        script: Script[TReturn],
        source: ScriptSource,
        loader: InteractiveLoader,
        diagnostics: list[Diagnostic] | None = None,
    ) -> None:
        self.script = script
        self.source = source
        self.loader = loader
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics or ())

    @property
    def configuration(self: "ScriptCompilationContext[TReturn]") -> CompilationConfiguration:
        return self.script.configuration

    @property
    def warnings(self: "ScriptCompilationContext[TReturn]") -> tuple[Diagnostic, ...]:
        """Non-error diagnostics, ordered."""
        return tuple(d for d in self.diagnostics if not d.is_error)

    def run(self: "ScriptCompilationContext[TReturn]", host: object | None = None) -> TReturn:
        return self.script.run(host)


class ScriptCompiler:
    """Compiles scripts into runnable compilation contexts.

    Example:
        >>> compiler = ScriptCompiler(ScriptLogger())
        >>> context = ScriptContext(ScriptSource("1 + 1"), working_directory=Path("my-script"))
        >>> compiler.create_compilation_context(context).run()
        2
    """

    def __init__(
        self: "ScriptCompiler",
        logger: ScriptLogger,
        engine: ScriptEngine | None = None,
        reader: ManifestReader | None = None,
        policy: CompilationPolicy = DEFAULT_POLICY,
        runtime_identifier: RuntimeIdentifier | None = None,
        configuration: str = "Debug",
        debug_mode: bool = False,
    ) -> None:
        """Initialize compiler.

        Args:
            logger: Sink for traces and failure diagnostics
            engine: Compile step (default: PythonScriptEngine)
            reader: Dependency manifest reader (default: ManifestReader for script.yaml)
            policy: Default imports, references and inherited prefixes
            runtime_identifier: Platform tag override (default: detected from the host)
            configuration: Manifest profile of contexts made by create_context
            debug_mode: Debug mode of contexts made by create_context
        """
        self.logger = logger
        self.engine = engine or PythonScriptEngine()
        self.policy = policy
        self.runtime_identifier = runtime_identifier
        self.configuration = configuration
        self.debug_mode = debug_mode
        self.asset_resolver = RuntimeAssetResolver(reader or ManifestReader(), logger)
        self.builder = ConfigurationBuilder(policy)
        self.augmenter = InheritedReferenceAugmenter(logger, prefixes=policy.inherited_prefixes)

    @classmethod
    def from_settings(
        cls,
        settings: CompilerSettings | None = None,
        logger: ScriptLogger | None = None,
        working_directory: Path | str | None = None,
    ) -> "ScriptCompiler":
        """Create a compiler configured from CompilerSettings.

        Applies the settings' log level to the script_library loggers.

        Args:
            settings: Settings to apply (default: load_config() for working_directory)
            logger: Log sink (default: ScriptLogger honouring settings.verbose)
            working_directory: Script directory whose .scriptlib.yaml is layered in

        Returns:
            Compiler whose create_context uses the configured profile and debug mode
        """
        if settings is None:
            settings = load_config(working_directory=working_directory)
        configure_logging(settings.log_level)

        return cls(
            logger or ScriptLogger(verbose=settings.verbose),
            reader=ManifestReader(settings.manifest_name),
            policy=CompilationPolicy.from_settings(settings),
            configuration=settings.configuration,
            debug_mode=settings.debug,
        )

    def create_context(
        self: "ScriptCompiler",
        source: ScriptSource | str,
        working_directory: Path | str,
        file_path: str | None = None,
    ) -> ScriptContext:
        """ScriptContext using this compiler's profile and debug mode."""
        if isinstance(source, str):
            source = ScriptSource(source)
        return ScriptContext(
            source,
            working_directory=Path(working_directory),
            configuration=self.configuration,
            debug_mode=self.debug_mode,
            file_path=file_path,
        )

    def create_script_options(self: "ScriptCompiler", context: ScriptContext) -> CompilationConfiguration:
        """Base configuration of a script, before any references are resolved."""
        return self.builder.build(context)

    def create_compilation_context(
        self: "ScriptCompiler",
        context: ScriptContext,
        return_type: type[TReturn] | Any = object,
        host_type: type | None = None,
        loader: InteractiveLoader | None = None,
    ) -> ScriptCompilationContext[TReturn]:
        """Compile a script.

        Args:
            context: Compilation request
            return_type: Expected type of the script's trailing expression
            host_type: Type whose instances supply script globals
            loader: Loader of a previous compilation to chain onto (default: a new one)

        Returns:
            ScriptCompilationContext holding the script, its source and its loader

        Raises:
            ArgumentError: If context is None, or loader serves another host type
            ResolutionError: If the dependency manifest can't be resolved
            CompilationError: If the script has one or more error diagnostics
        """
        if context is None:
            raise ArgumentError("context must not be None")

        runtime_identifier = self.runtime_identifier or get_runtime_identifier()
        self.logger.verbose(f"Current runtime is '{runtime_identifier}'.")

        runtime_assets = self.asset_resolver.resolve(context.working_directory, context.configuration, runtime_identifier)

        configuration = self.create_script_options(context)
        configuration = self.augmenter.augment(configuration, runtime_identifier)

        for asset_path in runtime_assets:
            self.logger.verbose(f"Adding reference to a runtime dependency => {asset_path}")
        configuration = configuration.add_references(*(FileReference(path) for path in runtime_assets))

        if loader is None:
            loader = InteractiveLoader(host_type)
        else:
            loader.bind(host_type)

        script = self.engine.create_script(context.source, configuration, return_type, host_type, loader)
        diagnostics = order_diagnostics(script.get_diagnostics())

        if has_errors(diagnostics):
            for diagnostic in diagnostics:
                self.logger.log(str(diagnostic))
            raise CompilationError(COMPILATION_FAILED, diagnostics)

        logger.debug(f"Compiled script with {len(diagnostics)} diagnostics and {len(configuration.references)} references")
        return ScriptCompilationContext(script, context.source, loader, diagnostics)

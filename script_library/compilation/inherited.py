"""Inherited host references.

Scripts compile against the modules the host process already runs, not
copies resolved from disk, so objects crossing the host/script boundary
share the same types.

Contract:
- Inputs: CompilationConfiguration, runtime identifier, prefix allow-list
- Outputs: New configuration with host modules appended as ModuleReferences
- Side Effects: Imports matching modules by name (already loaded, so a lookup)
"""

import importlib
import sys
from collections.abc import Iterable
from collections.abc import Mapping
from types import ModuleType

from ..logger import ScriptLogger
from ..runtime.platform import RuntimeIdentifier
from .options import CompilationConfiguration
from .policy import DEFAULT_POLICY
from .references import ModuleReference


class InheritedReferenceAugmenter:
    """Adds loaded host modules matching an allow-list of name prefixes."""

    def __init__(
        self: "InheritedReferenceAugmenter",
        logger: ScriptLogger,
        prefixes: Iterable[str] = DEFAULT_POLICY.inherited_prefixes,
        modules: Mapping[str, ModuleType | None] | None = None,
    ) -> None:
        """Initialize augmenter.

        Args:
            logger: Sink for trace lines
            prefixes: Case-insensitive package names to inherit, with their submodules
            modules: Loaded module table (default: sys.modules)
        """
        self.logger = logger
        self.prefixes = tuple(p.casefold().rstrip(".") for p in prefixes)
        self._modules = modules

    def inherited_module_names(self: "InheritedReferenceAugmenter") -> list[str]:
        """Names of loaded host modules matching the allow-list, sorted."""
        modules = sys.modules if self._modules is None else self._modules
        names = sorted(name for name, module in list(modules.items()) if module is not None)
        return [name for name in names if self._matches(name.casefold())]

    def _matches(self: "InheritedReferenceAugmenter", name: str) -> bool:
        # A prefix names a package: "abc" matches "abc" and "abc.x", never "abcd"
        return any(name == prefix or name.startswith(prefix + ".") for prefix in self.prefixes)

    def augment(
        self: "InheritedReferenceAugmenter",
        configuration: CompilationConfiguration,
        runtime_identifier: RuntimeIdentifier | str,
    ) -> CompilationConfiguration:
        """Append inherited module references.

        Args:
            configuration: Configuration to extend
            runtime_identifier: Host platform tag

        Returns:
            New configuration; ``configuration`` is unchanged
        """
        self.logger.verbose(f"Inheriting host references for runtime '{runtime_identifier}'.")

        references = []
        for name in self.inherited_module_names():
            self.logger.verbose(f"Adding reference to an inherited dependency => {name}")
            references.append(ModuleReference(name=name, module=self._load(name)))

        return configuration.add_references(*references)

    def _load(self: "InheritedReferenceAugmenter", name: str) -> ModuleType:
        if self._modules is not None and isinstance(self._modules.get(name), ModuleType):
            return self._modules[name]
        return importlib.import_module(name)

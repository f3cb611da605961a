"""Interactive loader shared by chained script submissions.

A loader is created by the first compilation of a session and handed
explicitly to every later compilation that should see its state.

Contract:
- Inputs: Compiled scripts, host objects
- Outputs: Script results
- Side Effects: Executes code; extends sys.path while a script runs
"""

import builtins
import importlib
import logging
import sys
from collections.abc import Iterable
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING
from typing import Any

from ..errors import ArgumentError

if TYPE_CHECKING:
    from .engine import Script

logger = logging.getLogger(__name__)


def host_members(host: object) -> dict[str, Any]:
    """Public attributes of a host object, as script globals."""
    return {name: getattr(host, name) for name in dir(host) if not name.startswith("_")}


class InteractiveLoader:
    """Owns the global namespace and import paths of a script session.

    Example:
        >>> from pathlib import Path
        >>> from script_library import ScriptCompiler, ScriptContext, ScriptLogger, ScriptSource
        >>> compiler, cwd = ScriptCompiler(ScriptLogger()), Path(".")
        >>> first = compiler.create_compilation_context(ScriptContext(ScriptSource("x = 20"), cwd))
        >>> first.run()
        >>> second = compiler.create_compilation_context(ScriptContext(ScriptSource("x + 1"), cwd), loader=first.loader)
        >>> second.run()
        21
    """

    def __init__(self: "InteractiveLoader", host_type: type | None = None) -> None:
        """Initialize loader.

        Args:
            host_type: Type whose instances supply script globals, if any
        """
        self.host_type = host_type
        self.namespace: dict[str, Any] = {"__name__": "__script__", "__builtins__": builtins}
        self.submission_count = 0
        self._search_paths: list[str] = []

    @property
    def search_paths(self: "InteractiveLoader") -> tuple[str, ...]:
        return tuple(self._search_paths)

    def bind(self: "InteractiveLoader", host_type: type | None) -> None:
        """Check that a compilation uses the host type this loader serves.

        Raises:
            ArgumentError: If the loader is bound to a different host type
        """
        if host_type is not self.host_type:
            raise ArgumentError(
                f"Loader is bound to host type {_type_name(self.host_type)}, "
                f"cannot be reused for {_type_name(host_type)}"
            )

    def add_search_paths(self: "InteractiveLoader", paths: Iterable[Path | str]) -> None:
        for path in paths:
            entry = str(path)
            if entry not in self._search_paths:
                self._search_paths.append(entry)

    @contextmanager
    def activated(self: "InteractiveLoader") -> Iterator[None]:
        """Put this loader's search paths on sys.path for the duration of a run."""
        added = [p for p in self._search_paths if p not in sys.path]
        sys.path[:0] = added
        try:
            yield
        finally:
            for entry in added:
                if entry in sys.path:
                    sys.path.remove(entry)

    def execute(self: "InteractiveLoader", script: "Script[Any]", host: object | None = None) -> Any:
        """Run a compiled script in the shared namespace.

        Args:
            script: Compiled script without errors
            host: Host object whose public members become globals

        Returns:
            Value of the script's trailing expression, or None

        Raises:
            ArgumentError: If the host does not match the loader's host type
        """
        self.bind(script.host_type)
        if self.host_type is not None:
            if host is None:
                raise ArgumentError(f"A host of type {_type_name(self.host_type)} is required to run this script")
            if not isinstance(host, self.host_type):
                raise ArgumentError(f"Host must be {_type_name(self.host_type)}, got {type(host).__name__}")

        self.add_search_paths(script.search_paths)
        if host is not None:
            self.namespace.update(host_members(host))

        result = None
        with self.activated():
            self._bind_imports(script.configuration.imports)
            for unit in script.units:
                exec(unit.body, self.namespace)
                result = eval(unit.result, self.namespace) if unit.result is not None else None

        self.submission_count += 1
        logger.debug(f"Executed submission {self.submission_count} ({len(script.units)} units)")
        return result

    def _bind_imports(self: "InteractiveLoader", names: Iterable[str]) -> None:
        for name in names:
            importlib.import_module(name)
            top_level = name.split(".", 1)[0]
            # Earlier submissions may have rebound the name
            self.namespace.setdefault(top_level, importlib.import_module(top_level))


def _type_name(value: type | None) -> str:
    return "None" if value is None else value.__qualname__

"""Python compile step.

Turns script source and a CompilationConfiguration into a Script holding
code objects and diagnostics. Nothing runs until ``Script.run``.

Contract:
- Inputs: ScriptSource, CompilationConfiguration, return type, host type, loader
- Outputs: Script with every diagnostic collected (no short-circuit on first error)
- Side Effects: Reads ``#load`` targets from disk
"""

import ast
import hashlib
import io
import logging
import re
import sys
import tokenize
import warnings
from dataclasses import dataclass
from importlib.machinery import PathFinder
from pathlib import Path
from types import CodeType
from typing import Any
from typing import Generic
from typing import Protocol
from typing import TypeVar
from typing import get_origin

from ..errors import CompilationError
from ..models.diagnostics import Diagnostic
from ..models.diagnostics import DiagnosticSeverity
from ..models.diagnostics import has_errors
from ..models.diagnostics import order_diagnostics
from ..models.scripts import ScriptSource
from .loader import InteractiveLoader
from .options import CompilationConfiguration

logger = logging.getLogger(__name__)

TReturn = TypeVar("TReturn")

SCRIPT_FILENAME = "<script>"
COMPILATION_FAILED = "Script compilation failed due to one or more errors."

# Diagnostic codes
SYNTAX_ERROR = "SL1001"
COMPILER_WARNING = "SL1002"
REFERENCE_NOT_FOUND = "SL0006"
LOAD_NOT_FOUND = "SL0007"
ENCODING_ERROR = "SL0008"
UNRESOLVED_IMPORT = "SL2001"

DIRECTIVE_PATTERN = re.compile(r"""^#(?P<kind>r|load)[ \t]+(?P<quote>["'])(?P<path>.+?)(?P=quote)[ \t]*$""")

# Physical lines as the tokenizer counts them: only \r\n, \r and \n end a line
LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")


@dataclass(frozen=True)
class CompiledUnit:
    """Code of one source file.

    Attributes:
        file_path: File the code came from (None for the main script without a path)
        body: Statements to exec
        result: Trailing expression to eval, if the source ends with one
    """

    file_path: str | None
    body: CodeType
    result: CodeType | None = None


@dataclass(frozen=True)
class Directive:
    """A ``#r`` or ``#load`` comment line and its location."""

    kind: str
    path: str
    start: int
    line: int
    column: int


class Script(Generic[TReturn]):
    """Compiled script: code units, diagnostics and the loader that runs them."""

    def __init__(
        self: "Script[TReturn]",
        source: ScriptSource,
        configuration: CompilationConfiguration,
        return_type: type[TReturn] | Any,
        host_type: type | None,
        loader: InteractiveLoader,
        units: list[CompiledUnit],
        diagnostics: list[Diagnostic],
        search_paths: list[Path],
        checksum: str | None = None,
    ) -> None:
        self.source = source
        self.configuration = configuration
        self.return_type = return_type
        self.host_type = host_type
        self.loader = loader
        self.units = tuple(units)
        self.search_paths = tuple(search_paths)
        self.checksum = checksum
        self._diagnostics = tuple(diagnostics)

    def get_diagnostics(self: "Script[TReturn]") -> list[Diagnostic]:
        """Diagnostics in the order the compile step produced them."""
        return list(self._diagnostics)

    def run(self: "Script[TReturn]", host: object | None = None) -> TReturn:
        """Execute the script in its loader's namespace.

        Args:
            host: Host object whose public members are visible as globals

        Returns:
            Value of the trailing expression, or None

        Raises:
            CompilationError: If the script has error diagnostics
            TypeError: If the result is not an instance of the return type
        """
        if has_errors(self._diagnostics):
            raise CompilationError(COMPILATION_FAILED, order_diagnostics(self._diagnostics))

        result = self.loader.execute(self, host)

        expected = get_origin(self.return_type) or self.return_type
        if result is not None and isinstance(expected, type) and expected is not object and not isinstance(result, expected):
            raise TypeError(f"Script returned {type(result).__name__}, expected {expected.__name__}")
        return result


class ScriptEngine(Protocol):
    """Compile step used by ScriptCompiler."""

    def create_script(
        self,
        source: ScriptSource,
        configuration: CompilationConfiguration,
        return_type: Any,
        host_type: type | None,
        loader: InteractiveLoader,
    ) -> Script[Any]: ...


class _SourceMap:
    """Converts between (line, column) and character offsets of a source."""

    def __init__(self: "_SourceMap", text: str) -> None:
        self.lines = LINE_PATTERN.findall(text) or [""]
        self.starts = [0]
        for line in self.lines:
            self.starts.append(self.starts[-1] + len(line))

    def offset(self: "_SourceMap", line: int, column: int) -> int:
        """Character offset of a 1-based line and 1-based column."""
        if line < 1:
            return 0
        index = min(line, len(self.lines)) - 1
        return self.starts[index] + max(column - 1, 0)

    def char_column(self: "_SourceMap", line: int, byte_offset: int) -> int:
        """1-based character column of a 0-based UTF-8 byte offset (as reported by ast)."""
        if line < 1 or line > len(self.lines):
            return byte_offset + 1
        prefix = self.lines[line - 1].encode("utf-8")[:byte_offset]
        return len(prefix.decode("utf-8", errors="ignore")) + 1

    def position(self: "_SourceMap", offset: int) -> tuple[int, int]:
        """1-based (line, column) of a character offset."""
        for index in range(len(self.lines)):
            if offset < self.starts[index + 1]:
                return index + 1, offset - self.starts[index] + 1
        return len(self.lines), offset - self.starts[len(self.lines) - 1] + 1


class PythonScriptEngine:
    """Compiles scripts with the interpreter's own parser and compiler.

    Example:
        >>> engine = PythonScriptEngine()
        >>> script = engine.create_script(ScriptSource("1 + 1"), CompilationConfiguration(), object, None,
        ...                               InteractiveLoader())
        >>> script.get_diagnostics()
        []
        >>> script.run()
        2
    """

    def create_script(
        self: "PythonScriptEngine",
        source: ScriptSource,
        configuration: CompilationConfiguration,
        return_type: Any,
        host_type: type | None,
        loader: InteractiveLoader,
    ) -> Script[Any]:
        """Compile a script and collect its diagnostics.

        Args:
            source: Script source
            configuration: Imports, references, resolvers and settings
            return_type: Expected type of the trailing expression
            host_type: Type of the host object supplying globals
            loader: Loader the script will run in

        Returns:
            Script; callers must inspect ``get_diagnostics()`` before running it
        """
        diagnostics: list[Diagnostic] = []
        file_path = configuration.file_path
        source_map = _SourceMap(source.text)

        checksum = self._check_encoding(source.text, configuration, source_map, diagnostics)

        search_paths: list[Path] = []
        for reference in configuration.file_references:
            if reference.exists():
                search_paths.append(reference.path)
            else:
                diagnostics.append(
                    Diagnostic(
                        DiagnosticSeverity.ERROR,
                        f"Referenced file '{reference.path}' could not be found",
                        code=REFERENCE_NOT_FOUND,
                    )
                )

        units: list[CompiledUnit] = []
        trees: list[tuple[ast.Module, _SourceMap, str | None]] = []
        loaded: set[Path] = set()
        if file_path:
            loaded.add(Path(file_path).resolve())

        self._compile_file(
            source.text, file_path, configuration, source_map, units, trees, diagnostics, search_paths, loaded
        )

        for tree, tree_map, tree_path in trees:
            self._check_imports(tree, tree_map, tree_path, configuration, search_paths, loader, diagnostics)

        logger.debug(f"Compiled {file_path or SCRIPT_FILENAME}: {len(units)} units, {len(diagnostics)} diagnostics")
        return Script(
            source=source,
            configuration=configuration,
            return_type=return_type,
            host_type=host_type,
            loader=loader,
            units=units,
            diagnostics=diagnostics,
            search_paths=search_paths,
            checksum=checksum,
        )

    def _compile_file(
        self: "PythonScriptEngine",
        text: str,
        file_path: str | None,
        configuration: CompilationConfiguration,
        source_map: _SourceMap,
        units: list[CompiledUnit],
        trees: list[tuple[ast.Module, _SourceMap, str | None]],
        diagnostics: list[Diagnostic],
        search_paths: list[Path],
        loaded: set[Path],
    ) -> None:
        """Compile one file after the files its ``#load`` directives pull in."""
        for directive in self._directives(text, file_path, source_map):
            kind, requested = directive.kind, directive.path
            start, line, column = directive.start, directive.line, directive.column

            if kind == "r":
                resolved = configuration.metadata_resolver.resolve(requested, file_path)
                if resolved is None:
                    diagnostics.append(
                        Diagnostic(
                            DiagnosticSeverity.ERROR,
                            f"Referenced file '{requested}' could not be found",
                            start=start,
                            code=REFERENCE_NOT_FOUND,
                            file_path=file_path,
                            line=line,
                            column=column,
                        )
                    )
                elif resolved not in search_paths:
                    search_paths.append(resolved)
                continue

            resolved = configuration.source_resolver.resolve(requested, file_path)
            if resolved is None:
                diagnostics.append(
                    Diagnostic(
                        DiagnosticSeverity.ERROR,
                        f"Script file '{requested}' could not be found",
                        start=start,
                        code=LOAD_NOT_FOUND,
                        file_path=file_path,
                        line=line,
                        column=column,
                    )
                )
                continue
            if resolved in loaded:
                continue
            loaded.add(resolved)

            try:
                loaded_text = resolved.read_text(encoding=configuration.file_encoding)
            except (OSError, UnicodeDecodeError) as e:
                diagnostics.append(
                    Diagnostic(
                        DiagnosticSeverity.ERROR,
                        f"Script file '{requested}' could not be read: {e}",
                        start=start,
                        code=LOAD_NOT_FOUND,
                        file_path=file_path,
                        line=line,
                        column=column,
                    )
                )
                continue

            self._compile_file(
                loaded_text,
                str(resolved),
                configuration,
                _SourceMap(loaded_text),
                units,
                trees,
                diagnostics,
                search_paths,
                loaded,
            )

        unit, tree = self._compile_unit(text, file_path, configuration, source_map, diagnostics)
        if unit is not None:
            units.append(unit)
        if tree is not None:
            trees.append((tree, source_map, file_path))

    @staticmethod
    def _directives(text: str, file_path: str | None, source_map: _SourceMap) -> list[Directive]:
        """Directive comments that stand alone on their line.

        Only COMMENT tokens count, so directive-shaped text inside string
        literals is ignored. Scanning stops at the first tokenize error; the
        parser reports that error when the file is compiled.
        """
        directives: list[Directive] = []
        tokens = tokenize.generate_tokens(io.StringIO(text, newline="").readline)
        try:
            for token in tokens:
                if token.type != tokenize.COMMENT or token.line[: token.start[1]].strip():
                    continue
                match = DIRECTIVE_PATTERN.match(token.string)
                if match is None:
                    continue
                line, column = token.start[0], token.start[1] + 1
                directives.append(
                    Directive(
                        kind=match.group("kind"),
                        path=match.group("path"),
                        start=source_map.offset(line, column),
                        line=line,
                        column=column,
                    )
                )
        except (tokenize.TokenError, SyntaxError) as e:
            logger.debug(f"Directive scan of {file_path or SCRIPT_FILENAME} stopped: {e}")
        return directives

    def _compile_unit(
        self: "PythonScriptEngine",
        text: str,
        file_path: str | None,
        configuration: CompilationConfiguration,
        source_map: _SourceMap,
        diagnostics: list[Diagnostic],
    ) -> tuple[CompiledUnit | None, ast.Module | None]:
        filename = file_path or SCRIPT_FILENAME
        optimize = 0 if configuration.emit_debug_information else 1
        tree = None

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                tree = ast.parse(text, filename=filename, mode="exec")
                body_statements = tree.body
                result_node = None
                if body_statements and isinstance(body_statements[-1], ast.Expr):
                    result_node = ast.Expression(body=body_statements[-1].value)
                    body_statements = body_statements[:-1]

                body = compile(ast.Module(body=body_statements, type_ignores=[]), filename, "exec", optimize=optimize)
                result = compile(result_node, filename, "eval", optimize=optimize) if result_node else None
                unit = CompiledUnit(file_path=file_path, body=body, result=result)
            except SyntaxError as e:
                diagnostics.append(self._syntax_error(e, file_path, source_map))
                unit = None

        for warning in caught:
            if not issubclass(warning.category, SyntaxWarning | DeprecationWarning):
                continue
            line = warning.lineno or 0
            diagnostics.append(
                Diagnostic(
                    DiagnosticSeverity.WARNING,
                    str(warning.message),
                    start=source_map.offset(line, 1),
                    code=COMPILER_WARNING,
                    file_path=file_path,
                    line=line,
                    column=1 if line else 0,
                )
            )

        return unit, tree

    @staticmethod
    def _syntax_error(error: SyntaxError, file_path: str | None, source_map: _SourceMap) -> Diagnostic:
        line = error.lineno or 1
        column = error.offset or 1
        return Diagnostic(
            DiagnosticSeverity.ERROR,
            error.msg,
            start=source_map.offset(line, column),
            code=SYNTAX_ERROR,
            file_path=file_path,
            line=line,
            column=column,
        )

    @staticmethod
    def _check_encoding(
        text: str,
        configuration: CompilationConfiguration,
        source_map: _SourceMap,
        diagnostics: list[Diagnostic],
    ) -> str | None:
        """Validate the source against its encoding; returns the debug checksum."""
        try:
            encoded = text.encode(configuration.file_encoding)
        except UnicodeEncodeError as e:
            line, column = source_map.position(e.start)
            diagnostics.append(
                Diagnostic(
                    DiagnosticSeverity.ERROR,
                    f"Source cannot be encoded as '{configuration.file_encoding}': {e.reason}",
                    start=e.start,
                    code=ENCODING_ERROR,
                    file_path=configuration.file_path,
                    line=line,
                    column=column,
                )
            )
            return None

        if not configuration.emit_debug_information:
            return None
        return hashlib.sha256(encoded).hexdigest()

    @staticmethod
    def _check_imports(
        tree: ast.Module,
        source_map: _SourceMap,
        file_path: str | None,
        configuration: CompilationConfiguration,
        search_paths: list[Path],
        loader: InteractiveLoader,
        diagnostics: list[Diagnostic],
    ) -> None:
        """Warn about absolute imports no reference can satisfy."""
        known = set(sys.stdlib_module_names) | set(sys.builtin_module_names)
        known.update(reference.top_level for reference in configuration.module_references)
        known.update(name.split(".", 1)[0] for name in configuration.imports)
        paths = [str(p) for p in search_paths] + list(loader.search_paths)
        found: dict[str, bool] = {}

        def resolvable(name: str) -> bool:
            top_level = name.split(".", 1)[0]
            if top_level in known:
                return True
            if top_level not in found:
                found[top_level] = bool(paths) and PathFinder.find_spec(top_level, paths) is not None
            return found[top_level]

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                names = [alias.name for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                names = [node.module]
            else:
                continue

            for name in names:
                if resolvable(name):
                    continue
                column = source_map.char_column(node.lineno, node.col_offset)
                diagnostics.append(
                    Diagnostic(
                        DiagnosticSeverity.WARNING,
                        f"Import '{name}' could not be resolved from the compilation references",
                        start=source_map.offset(node.lineno, column),
                        code=UNRESOLVED_IMPORT,
                        file_path=file_path,
                        line=node.lineno,
                        column=column,
                    )
                )

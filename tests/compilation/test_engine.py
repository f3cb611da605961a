"""
Unit tests for PythonScriptEngine.

Tests diagnostics collection, directives and REPL-style results.
"""

from pathlib import Path

import pytest

from script_library.compilation import CompilationConfiguration
from script_library.compilation import InteractiveLoader
from script_library.compilation import MetadataResolver
from script_library.compilation import PythonScriptEngine
from script_library.compilation import SourceFileResolver
from script_library.compilation.engine import Script
from script_library.errors import CompilationError
from script_library.models import DiagnosticSeverity
from script_library.models import ScriptSource


def _compile(text: str, configuration: CompilationConfiguration | None = None, **kwargs: object) -> Script:
    return PythonScriptEngine().create_script(
        ScriptSource(text),
        configuration or CompilationConfiguration(),
        kwargs.get("return_type", object),
        None,
        InteractiveLoader(),
    )


def _codes(script: Script) -> list[str]:
    return [d.code for d in script.get_diagnostics()]


@pytest.mark.unit
class TestResults:
    def test_trailing_expression_is_result(self) -> None:
        script = _compile("1 + 1")

        assert script.get_diagnostics() == []
        assert script.run() == 2

    def test_statements_then_expression(self) -> None:
        assert _compile("x = 20\ny = 1\nx + y\n").run() == 21

    def test_no_trailing_expression_returns_none(self) -> None:
        assert _compile("x = 1\n").run() is None

    def test_empty_script(self) -> None:
        assert _compile("").run() is None

    def test_return_type_checked(self) -> None:
        assert _compile("'text'", return_type=str).run() == "text"

        with pytest.raises(TypeError, match="expected int"):
            _compile("'text'", return_type=int).run()

    def test_generic_return_type(self) -> None:
        assert _compile("[1, 2]", return_type=list[int]).run() == [1, 2]

    def test_run_with_errors_raises(self) -> None:
        script = _compile("int x = ")

        with pytest.raises(CompilationError):
            script.run()

    def test_release_strips_asserts(self) -> None:
        release = CompilationConfiguration().with_emit_debug_information(False)
        debug = CompilationConfiguration().with_emit_debug_information(True)

        assert _compile("assert False\n1", release).run() == 1
        with pytest.raises(AssertionError):
            _compile("assert False\n1", debug).run()


@pytest.mark.unit
class TestDiagnostics:
    def test_syntax_error(self) -> None:
        script = _compile("int x = ")

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.severity is DiagnosticSeverity.ERROR
        assert diagnostic.code == "SL1001"
        assert diagnostic.line == 1

    def test_syntax_error_offset(self) -> None:
        script = _compile("a = 1\nb = (\n")

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.line == 2
        assert diagnostic.start >= len("a = 1\n")

    def test_compile_stage_error(self) -> None:
        script = _compile("x = 1\nreturn x\n")

        assert _codes(script) == ["SL1001"]
        assert script.get_diagnostics()[0].line == 2

    def test_compiler_warning(self) -> None:
        script = _compile("x = 1\nx is 1\n")

        warnings = [d for d in script.get_diagnostics() if d.code == "SL1002"]
        assert warnings
        assert warnings[0].severity is DiagnosticSeverity.WARNING
        assert warnings[0].line == 2
        assert warnings[0].start == len("x = 1\n")

    def test_unresolved_import_warning(self) -> None:
        script = _compile("import json\nimport not_a_real_module_xyz\n")

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.code == "SL2001"
        assert diagnostic.severity is DiagnosticSeverity.WARNING
        assert "not_a_real_module_xyz" in diagnostic.message
        assert diagnostic.start == len("import json\n")

    def test_import_resolved_through_file_reference(self, tmp_path: Path) -> None:
        package = tmp_path / "vendored_pkg_abc"
        package.mkdir()
        (package / "__init__.py").write_text("ANSWER = 42\n")

        configuration = CompilationConfiguration().add_references(tmp_path)
        script = _compile("import vendored_pkg_abc\nvendored_pkg_abc.ANSWER", configuration)

        assert script.get_diagnostics() == []
        assert script.run() == 42

    def test_missing_file_reference(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().add_references(tmp_path / "missing")

        script = _compile("1", configuration)

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.code == "SL0006"
        assert diagnostic.is_error
        assert diagnostic.start == 0

    def test_encoding_error(self) -> None:
        configuration = CompilationConfiguration().with_file_encoding("ascii")

        script = _compile("x = 'café'\n", configuration)

        assert "SL0008" in _codes(script)
        assert script.get_diagnostics()[0].start == len("x = 'caf")

    def test_all_diagnostics_collected(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().add_references(tmp_path / "missing")

        script = _compile("import not_a_real_module_xyz\nx is 1\n", configuration)

        assert set(_codes(script)) == {"SL0006", "SL2001", "SL1002"}

    def test_debug_checksum(self) -> None:
        debug = CompilationConfiguration().with_emit_debug_information(True)

        assert _compile("1", debug).checksum == "6b86b273ff34fce19d6b804eff5a3f5747ada4eaa22f1d49c01e52ddb7875b4b"
        assert _compile("1").checksum is None


@pytest.mark.unit
class TestDirectives:
    def test_load_directive_runs_first(self, tmp_path: Path) -> None:
        (tmp_path / "helpers.py").write_text("def double(x):\n    return x * 2\n")
        configuration = CompilationConfiguration().with_source_resolver(SourceFileResolver(base_directory=tmp_path))

        script = _compile('#load "helpers.py"\ndouble(21)\n', configuration)

        assert script.get_diagnostics() == []
        assert len(script.units) == 2
        assert script.run() == 42

    def test_nested_loads_once(self, tmp_path: Path) -> None:
        (tmp_path / "a.py").write_text('#load "b.py"\ncount = count + 1\n')
        (tmp_path / "b.py").write_text('#load "a.py"\ncount = 10\n')
        configuration = CompilationConfiguration().with_source_resolver(SourceFileResolver(base_directory=tmp_path))

        script = _compile('#load "a.py"\n#load "b.py"\ncount\n', configuration)

        assert script.get_diagnostics() == []
        assert script.run() == 11

    def test_missing_load(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().with_source_resolver(SourceFileResolver(base_directory=tmp_path))

        script = _compile('x = 1\n#load "nope.py"\n', configuration)

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.code == "SL0007"
        assert (diagnostic.line, diagnostic.column, diagnostic.start) == (2, 1, len("x = 1\n"))

    def test_load_errors_report_loaded_file(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text("def (:\n")
        configuration = CompilationConfiguration().with_source_resolver(SourceFileResolver(base_directory=tmp_path))

        script = _compile('#load "broken.py"\n1\n', configuration)

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.code == "SL1001"
        assert diagnostic.file_path == str((tmp_path / "broken.py").resolve())

    def test_reference_directive(self, tmp_path: Path) -> None:
        (tmp_path / "libs" / "directive_pkg_abc").mkdir(parents=True)
        (tmp_path / "libs" / "directive_pkg_abc" / "__init__.py").write_text("NAME = 'pkg'\n")
        configuration = CompilationConfiguration().with_metadata_resolver(MetadataResolver(base_directory=tmp_path))

        script = _compile('#r "libs"\nimport directive_pkg_abc\ndirective_pkg_abc.NAME\n', configuration)

        assert script.get_diagnostics() == []
        assert script.search_paths == ((tmp_path / "libs").resolve(),)
        assert script.run() == "pkg"

    def test_missing_reference_directive(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().with_metadata_resolver(MetadataResolver(base_directory=tmp_path))

        script = _compile("#r 'nowhere'\n1\n", configuration)

        assert _codes(script) == ["SL0006"]
        assert script.get_diagnostics()[0].line == 1

    def test_directive_text_inside_string_is_ignored(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().with_metadata_resolver(MetadataResolver(base_directory=tmp_path))

        script = _compile('doc = """\n#r "not-there"\n"""\nlen(doc)\n', configuration)

        assert script.get_diagnostics() == []
        assert script.run() == len('\n#r "not-there"\n')

    def test_trailing_comment_is_not_a_directive(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().with_source_resolver(SourceFileResolver(base_directory=tmp_path))

        script = _compile('x = 1  #load "nope.py"\nx\n', configuration)

        assert script.get_diagnostics() == []

    def test_indented_directive_column(self, tmp_path: Path) -> None:
        configuration = CompilationConfiguration().with_metadata_resolver(MetadataResolver(base_directory=tmp_path))

        script = _compile('x = 1\n  #r "nowhere"\n', configuration)

        (diagnostic,) = script.get_diagnostics()
        assert (diagnostic.line, diagnostic.column, diagnostic.start) == (2, 3, len("x = 1\n  "))


@pytest.mark.unit
class TestSourcePositions:
    def test_unicode_line_separator_inside_literal(self) -> None:
        text = 'x = "\u2028"\ny = (1 +\n'

        script = _compile(text)

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.code == "SL1001"
        assert diagnostic.line == 2
        assert diagnostic.start == text.index("(")

    def test_form_feed_does_not_split_lines(self) -> None:
        text = "\x0cx = 1\nx is 1\n"

        script = _compile(text)

        (warning,) = [d for d in script.get_diagnostics() if d.code == "SL1002"]
        assert warning.start == text.index("x is")

    def test_carriage_return_line_endings(self) -> None:
        text = "x = 1\r\ny = 2\rz = (\n"

        script = _compile(text)

        (diagnostic,) = script.get_diagnostics()
        assert diagnostic.line == 3
        assert diagnostic.start == text.index("(")

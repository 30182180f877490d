# konjure_plugins/core_compiler/tests/test_compiler.py

import logging
import os
from pathlib import Path

import pytest

from konjure_plugins.core_compiler.compiler import AssetCompiler, parse_line_break
from konjure_plugins.core_compiler.contracts import (
    CompilationScope,
    CompileExtension,
    CompileOptions,
    CompressorError,
    ConfigurationError,
    Diagnostic,
)
from konjure_plugins.core_compiler.discovery import search
from konjure_plugins.core_compiler.header import build_header


def _options(src: Path, dest: Path, **overrides) -> CompileOptions:
    return CompileOptions(src=src, dest=dest, version=overrides.pop("version", "1.0.0"), **overrides)


def _body(path: Path) -> str:
    """The artifact text after the header and its blank line."""
    return path.read_bytes().decode("utf-8").split("*/" + os.linesep + os.linesep, 1)[1]


class TestCompilationScope:

    @pytest.mark.parametrize("name, expected", [
        (None, CompilationScope.ALL),
        ("js", CompilationScope.JS),
        ("CSS", CompilationScope.CSS),
        ("All", CompilationScope.ALL),
    ])
    def test_resolve(self, name, expected):
        assert CompilationScope.resolve(name) is expected

    def test_unknown_scope(self):
        with pytest.raises(ConfigurationError, match="No such compilation scope less"):
            CompilationScope.resolve("less")

    def test_affects(self):
        assert CompilationScope.ALL.affects(CompileExtension.JS)
        assert CompilationScope.ALL.affects(CompileExtension.CSS)
        assert CompilationScope.JS.affects(CompileExtension.JS)
        assert not CompilationScope.JS.affects(CompileExtension.CSS)
        assert not CompilationScope.CSS.affects(CompileExtension.JS)


class TestParseLineBreak:

    def test_ignored_without_minify(self):
        assert parse_line_break("80", minify=False) == -1

    def test_parses_integer(self):
        assert parse_line_break("80", minify=True) == 80

    def test_invalid_value_is_logged_and_unbounded(self, caplog):
        assert parse_line_break("eighty", minify=True) == -1
        assert "Could not parse integer for line break length" in caplog.text


class TestAssetCompiler:

    def test_end_to_end_without_minify(self, compiler: AssetCompiler, source_tree: Path, tmp_path: Path, fixed_clock):
        dest = tmp_path / "dist"
        report = compiler.execute(_options(source_tree, dest, scope="all"))

        assert report.ok
        assert report.files_discovered == 4

        js_file = dest / "konjure-min.js"
        css_file = dest / "konjure-min.css"
        js_order = [p for p in search(source_tree, False) if p.name.endswith(".js")]
        expected_js = "".join(p.read_text() + os.linesep for p in js_order)

        header = build_header(CompileExtension.JS, "1.0.0", fixed_clock())
        assert js_file.read_bytes().decode("utf-8") == header + os.linesep + os.linesep + expected_js
        assert _body(css_file) == "body{color:red}" + os.linesep
        assert "Konjure UI CSS Library v1.0.0" in css_file.read_text()

        assert report.for_extension(CompileExtension.JS).output_path == js_file
        assert report.for_extension(CompileExtension.JS).files_combined == 2

    def test_recursive_includes_nested_files(self, compiler: AssetCompiler, source_tree: Path, tmp_path: Path):
        report = compiler.execute(_options(source_tree, tmp_path / "dist", recursive=True, scope="js"))

        assert report.for_extension(CompileExtension.JS).files_combined == 3
        assert "var z=3;" in _body(tmp_path / "dist" / "konjure-min.js")

    @pytest.mark.parametrize("scope, written, absent", [
        ("js", "konjure-min.js", "konjure-min.css"),
        ("css", "konjure-min.css", "konjure-min.js"),
    ])
    def test_scope_filtering(self, compiler, source_tree, tmp_path, scope, written, absent):
        dest = tmp_path / "dist"
        report = compiler.execute(_options(source_tree, dest, scope=scope))

        assert len(report.extensions) == 1
        assert (dest / written).is_file()
        assert not (dest / absent).exists()

    def test_is_idempotent_without_minify(self, compiler, source_tree, tmp_path):
        dest = tmp_path / "dist"
        compiler.execute(_options(source_tree, dest))
        first = {p.name: p.read_bytes() for p in dest.iterdir()}
        compiler.execute(_options(source_tree, dest))
        second = {p.name: p.read_bytes() for p in dest.iterdir()}

        assert first == second

    def test_empty_family_still_writes_header(self, compiler, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        (src / "only.css").write_text("a{}")

        report = compiler.execute(_options(src, tmp_path / "dist"))

        assert report.for_extension(CompileExtension.JS).files_combined == 0
        assert _body(tmp_path / "dist" / "konjure-min.js") == ""

    def test_missing_source_is_a_configuration_error(self, compiler, tmp_path, caplog):
        dest = tmp_path / "dist"
        report = compiler.execute(_options(tmp_path / "missing", dest))

        assert report.error.startswith("No such source directory")
        assert report.extensions == []
        assert not dest.exists()
        assert "No such source directory" in caplog.text

    def test_source_file_is_a_configuration_error(self, compiler, tmp_path):
        src = tmp_path / "a.js"
        src.write_text("var x;")
        report = compiler.execute(_options(src, tmp_path / "dist"))

        assert report.error == "Source specified is not a directory"
        assert not (tmp_path / "dist").exists()

    def test_unknown_scope_is_a_configuration_error(self, compiler, source_tree, tmp_path):
        report = compiler.execute(_options(source_tree, tmp_path / "dist", scope="sass"))

        assert report.error == "No such compilation scope sass"
        assert not (tmp_path / "dist").exists()

    def test_unusable_destination_is_a_configuration_error(self, compiler, source_tree, tmp_path):
        dest = tmp_path / "taken"
        dest.write_text("not a directory")

        report = compiler.execute(_options(source_tree, dest))
        assert report.error.startswith("Could not create destination directory")

    def test_source_is_validated_before_destination_is_prepared(self, compiler, tmp_path):
        dest = tmp_path / "taken"
        dest.write_text("not a directory")

        report = compiler.execute(_options(tmp_path / "missing", dest, scope="sass"))

        assert report.error.startswith("No such source directory")
        assert dest.is_file()

    def test_unreadable_file_skips_only_its_extension(self, compiler, source_tree, tmp_path, caplog):
        (source_tree / "broken.js").write_bytes(b"\xff\xfe\xfa")
        dest = tmp_path / "dist"

        report = compiler.execute(_options(source_tree, dest))

        assert report.error is None
        assert not report.ok
        assert report.for_extension(CompileExtension.JS).error is not None
        assert not (dest / "konjure-min.js").exists()
        assert (dest / "konjure-min.css").is_file()
        assert "An error occurred while processing JS files" in caplog.text

    def test_write_failure_skips_only_its_extension(self, compiler, source_tree, tmp_path, caplog):
        dest = tmp_path / "dist"
        (dest / "konjure-min.css").mkdir(parents=True)

        report = compiler.execute(_options(source_tree, dest))

        assert report.for_extension(CompileExtension.CSS).error is not None
        assert (dest / "konjure-min.js").is_file()
        assert "An error occurred while writing output CSS" in caplog.text


class TestMinification:

    def test_minify_hands_buffer_and_line_break_to_compressors(self, compiler, js_compressor, css_compressor, source_tree, tmp_path, caplog):
        caplog.set_level(logging.INFO)
        dest = tmp_path / "dist"
        report = compiler.execute(_options(source_tree, dest, minify=True, line_break=120))

        assert js_compressor.calls[0][1] == 120
        assert "var x=1;" in js_compressor.calls[0][0]
        assert css_compressor.calls == [("body{color:red}" + os.linesep, 120)]
        assert _body(dest / "konjure-min.css") == "BODY{COLOR:RED}" + os.linesep
        assert report.for_extension(CompileExtension.CSS).minified
        assert "All JS sources minified..." in caplog.text
        assert "All CSS sources minified..." in caplog.text

    def test_compressors_untouched_without_minify(self, compiler, js_compressor, css_compressor, source_tree, tmp_path):
        compiler.execute(_options(source_tree, tmp_path / "dist"))

        assert js_compressor.calls == []
        assert css_compressor.calls == []

    def test_diagnostics_are_logged_with_and_without_position(self, make_compressor, source_tree, tmp_path, caplog, fixed_clock):
        diagnostics = [
            Diagnostic(level="warning", message="missing semicolon", line=3, column=7),
            Diagnostic(level="error", message="parse trouble"),
        ]
        compiler = AssetCompiler(make_compressor(diagnostics), make_compressor(), clock=fixed_clock)

        report = compiler.execute(_options(source_tree, tmp_path / "dist", minify=True, scope="js"))

        records = [(r.levelno, r.getMessage()) for r in caplog.records]
        assert (logging.WARNING, "3:7: missing semicolon") in records
        assert (logging.ERROR, "parse trouble") in records
        assert report.for_extension(CompileExtension.JS).diagnostics == diagnostics
        assert (tmp_path / "dist" / "konjure-min.js").is_file()

    def test_compressor_failure_keeps_unminified_buffer(self, make_compressor, source_tree, tmp_path, caplog, fixed_clock):
        failing = make_compressor(error=CompressorError("out of memory"))
        compiler = AssetCompiler(make_compressor(), failing, clock=fixed_clock)

        report = compiler.execute(_options(source_tree, tmp_path / "dist", minify=True, scope="css"))

        assert _body(tmp_path / "dist" / "konjure-min.css") == "body{color:red}" + os.linesep
        assert not report.for_extension(CompileExtension.CSS).minified
        assert "An error occurred while minifying JS/CSS files" in caplog.text

    def test_injected_logger_receives_records(self, make_compressor, source_tree, tmp_path, caplog, fixed_clock):
        caplog.set_level(logging.INFO)
        log = logging.getLogger("konjure.tests.injected")
        compiler = AssetCompiler(make_compressor(), make_compressor(), logger=log, clock=fixed_clock)

        compiler.execute(_options(source_tree, tmp_path / "dist"))

        assert any(r.name == "konjure.tests.injected" and "total files discovered" in r.getMessage()
                   for r in caplog.records)


def test_options_from_mapping(tmp_path):
    options = CompileOptions.model_validate({
        "src": str(tmp_path),
        "dest": str(tmp_path / "dist"),
        "version": "3.0",
        "minify": True,
    })

    assert options.src == tmp_path
    assert options.line_break == -1
    assert options.scope is None

# konjure_plugins/core_compiler/compiler.py
import os
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .combine import combine
from .contracts import (
    CombineError,
    CompilationScope,
    CompileExtension,
    CompileOptions,
    CompileReport,
    CompressorError,
    CompressorInterface,
    ConfigurationError,
    Diagnostic,
    ExtensionReport,
)
from .discovery import search
from .header import build_header

logger = logging.getLogger(__name__)

UNBOUNDED = -1


def parse_line_break(raw: Optional[str], minify: bool, log: Optional[logging.Logger] = None) -> int:
    """The line break length is only read when minifying; anything unparsable means unbounded."""
    if not minify or raw is None:
        return UNBOUNDED
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        (log or logger).error("Could not parse integer for line break length", exc_info=e)
        return UNBOUNDED


class AssetCompiler:
    """
    Concatenates the JS and CSS sources of a directory tree into
    ``konjure-min.js`` / ``konjure-min.css``, optionally minified, each
    prefixed with the Konjure license header.

    No exception escapes ``execute``: configuration errors abort the run,
    read and write errors only skip the affected extension, and minifier
    diagnostics are logged.
    """

    def __init__(
        self,
        js_compressor: CompressorInterface,
        css_compressor: CompressorInterface,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._compressors: Dict[CompileExtension, CompressorInterface] = {
            CompileExtension.JS: js_compressor,
            CompileExtension.CSS: css_compressor,
        }
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    def execute(self, options: CompileOptions) -> CompileReport:
        """Validates the run configuration, then compiles every extension in scope."""
        try:
            scope = self._validate(options)
            self._prepare_destination(options.dest)
        except ConfigurationError as e:
            self._logger.error(str(e))
            return CompileReport(error=str(e))

        return self.compile(
            src=options.src,
            dest=options.dest,
            version=options.version,
            minify=options.minify,
            recursive=options.recursive,
            line_break=options.line_break,
            scope=scope,
        )

    def _validate(self, options: CompileOptions) -> CompilationScope:
        src = options.src
        if not src.exists():
            raise ConfigurationError(f"No such source directory {src.resolve()}")
        if not src.is_dir():
            raise ConfigurationError("Source specified is not a directory")

        return CompilationScope.resolve(options.scope)

    def _prepare_destination(self, dest: Path):
        try:
            dest.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Could not create destination directory {dest}: {e}") from e

    def compile(
        self,
        src: Path,
        dest: Path,
        version: str,
        minify: bool = False,
        recursive: bool = False,
        line_break: int = UNBOUNDED,
        scope: CompilationScope = CompilationScope.ALL,
    ) -> CompileReport:
        all_files: List[Path] = search(src, recursive)
        self._logger.info(f"({len(all_files)}) total files discovered.")

        report = CompileReport(files_discovered=len(all_files))
        for extension in CompileExtension:
            if scope.affects(extension):
                report.extensions.append(
                    self.compile_extension(dest, version, minify, line_break, all_files, extension)
                )
        return report

    def compile_extension(
        self,
        dest: Path,
        version: str,
        minify: bool,
        line_break: int,
        all_files: List[Path],
        extension: CompileExtension,
    ) -> ExtensionReport:
        report = ExtensionReport(extension=extension)

        try:
            combined, report.files_combined = combine(all_files, extension, self._logger)
        except CombineError as e:
            self._logger.error(f"An error occurred while processing {extension} files", exc_info=e)
            report.error = str(e)
            return report

        content = self.post_process(combined, minify, line_break, extension, version, report)

        try:
            report.output_path = self.write_output(dest, extension, content)
        except OSError as e:
            self._logger.error(f"An error occurred while writing output {extension}", exc_info=e)
            report.error = str(e)
        return report

    def post_process(
        self,
        combined: str,
        minify: bool,
        line_break: int,
        extension: CompileExtension,
        version: str,
        report: Optional[ExtensionReport] = None,
    ) -> str:
        """Minifies (when asked) and prepends the header, separated by one blank line."""
        if minify:
            combined = self.minify(combined, line_break, extension, report)

        header = build_header(extension, version, self._clock())
        return header + os.linesep + os.linesep + combined

    def minify(
        self,
        combined: str,
        line_break: int,
        extension: CompileExtension,
        report: Optional[ExtensionReport] = None,
    ) -> str:
        compressor = self._compressors[extension]
        try:
            result = compressor.compress(combined, line_break)
        except (CompressorError, OSError) as e:
            # 压缩失败时保留未压缩的内容
            self._logger.error("An error occurred while minifying JS/CSS files", exc_info=e)
            return combined

        for diagnostic in result.diagnostics:
            self._report_diagnostic(diagnostic)
        if report is not None:
            report.minified = True
            report.diagnostics.extend(result.diagnostics)

        self._logger.info(f"All {extension} sources minified...")
        return result.output

    def _report_diagnostic(self, diagnostic: Diagnostic):
        if diagnostic.level == "error":
            self._logger.error(diagnostic.format())
        else:
            self._logger.warning(diagnostic.format())

    def write_output(self, dest: Path, extension: CompileExtension, content: str) -> Path:
        target = dest / extension.output_name
        target.write_bytes(content.encode("utf-8"))
        return target

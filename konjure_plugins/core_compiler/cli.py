# konjure_plugins/core_compiler/cli.py
from pathlib import Path
from typing import Callable, Optional

import typer

from konjure.core.contracts import Container
from .compiler import AssetCompiler, parse_line_break
from .contracts import CompileOptions

COMMAND_NAME = "compiler"


def build_compile_command(container: Container) -> Callable[..., None]:
    """Creates the `compiler` subcommand bound to the container's AssetCompiler."""

    def compile_command(
        scope: Optional[str] = typer.Argument(None, help="Compilation scope: js, css or all.", show_default="all"),
        src: Path = typer.Option(..., "--src", "-s", metavar="DIRECTORY", help="Source directory"),
        dest: Path = typer.Option(..., "--dest", "-d", metavar="DIRECTORY", help="Destination directory"),
        version: str = typer.Option(..., "--version", "-v", metavar="VERSION", help="Compilation version"),
        minify: bool = typer.Option(False, "--minify", "-m", help="Will minify css and js contents"),
        line_break: Optional[str] = typer.Option(None, "--line-break", "-lb", metavar="LENGTH", help="Sets minified line break length"),
        recursive: bool = typer.Option(False, "--recursive", "-r", help="Searches child directories recursively"),
    ):
        """
        Concatenates the JS and CSS sources of a directory into konjure-min.js / konjure-min.css.
        """
        compiler: AssetCompiler = container.resolve("asset_compiler")
        options = CompileOptions(
            src=src,
            dest=dest,
            version=version,
            minify=minify,
            recursive=recursive,
            line_break=parse_line_break(line_break, minify),
            scope=scope,
        )

        report = compiler.execute(options)
        if report.error is not None:
            typer.secho(f"Error: {report.error}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)

        for ext_report in report.extensions:
            if ext_report.output_path is not None:
                typer.secho(
                    f"{ext_report.extension}: {ext_report.files_combined} file(s) -> {ext_report.output_path}",
                    fg=typer.colors.GREEN,
                )
            else:
                typer.secho(f"{ext_report.extension}: skipped ({ext_report.error})", fg=typer.colors.YELLOW)

    return compile_command

"""Main CLI entry point."""

import logging
import sys
from pathlib import Path
from typing import IO, Optional

import rich_click as click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from dotjsx import __version__
from dotjsx.compiler import generate, parse
from dotjsx.compiler.exceptions import DotJsxError, NestingTooDeepError
from dotjsx.compiler.serializer import to_dict
from dotjsx.config import CompilerConfig

console = Console()
err_console = Console(stderr=True)

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_HELPTEXT_FIRST = True
click.rich_click.STYLE_COMMANDS_TABLE_SHOW_LINES = False
click.rich_click.STYLE_COMMANDS_TABLE_PAD_EDGE = False
click.rich_click.STYLE_COMMANDS_TABLE_HEADER = "bold magenta"
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running 'dotjsx --help' for more information."

# Cyan theme
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_OPTION = "cyan"
click.rich_click.STYLE_SWITCH = "cyan"
click.rich_click.STYLE_METAVAR = "dim white"
click.rich_click.STYLE_USAGE_COMMAND = "cyan"
click.rich_click.STYLE_USAGE = "dim"

click.rich_click.COMMAND_GROUPS = {
    "dotjsx": [
        {
            "name": "Commands",
            "commands": ["compile", "ast", "build"],
        }
    ]
}


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
    )
    logging.getLogger("dotjsx").setLevel(logging.DEBUG if verbose else logging.INFO)


def report_error(error: DotJsxError) -> None:
    """Render a compile error as a panel on stderr."""
    err_console.print(
        Panel(
            escape(str(error)),
            title=f"[bold red]{error.kind}[/]",
            border_style="red",
            expand=False,
        )
    )


def _source_name(stream: IO[str]) -> str:
    name = getattr(stream, "name", "")
    return "" if name in ("-", "<stdin>") else str(name)


@click.group(
    help=f"""
[bold white on cyan] dotjsx [/] [bold cyan]v{__version__}[/] Compile doT templates into TSX components.

Run [bold cyan]dotjsx compile TEMPLATE[/] to print the component source.
Run [bold cyan]dotjsx build SRC_DIR[/] to compile a whole directory.
"""
)
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    configure_logging(verbose)


@cli.command(name="compile")
@click.argument("template", type=click.File("r", encoding="utf-8"))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the component to a file instead of stdout.",
)
@click.option("--function-name", default="tpl", show_default=True, help="Exported function name")
@click.option("--context-param", default="it", show_default=True, help="Data parameter name")
@click.option(
    "--context-type", default="any", show_default=True, help="Data parameter type annotation"
)
def compile_command(
    template: IO[str],
    output: Optional[Path],
    function_name: str,
    context_param: str,
    context_type: str,
) -> None:
    """Compile a template (or '-' for stdin) into a TSX component."""
    try:
        config = CompilerConfig(
            function_name=function_name,
            context_param=context_param,
            context_type=context_type,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        source = generate(template.read(), config, _source_name(template))
    except DotJsxError as e:
        report_error(e)
        sys.exit(1)

    if output is None:
        click.echo(source)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source + "\n", encoding="utf-8")
    console.print(f"✅ Wrote [cyan]{escape(str(output))}[/]")


@cli.command()
@click.argument("template", type=click.File("r", encoding="utf-8"))
def ast(template: IO[str]) -> None:
    """Print the parsed template tree as JSON."""
    try:
        document = parse(template.read(), _source_name(template))
    except DotJsxError as e:
        report_error(e)
        sys.exit(1)

    try:
        data = to_dict(document)
    except RecursionError:
        report_error(
            NestingTooDeepError(
                "Template nesting is too deep to display", file_path=_source_name(template)
            )
        )
        sys.exit(1)

    console.print_json(data=data)


@cli.command()
@click.argument("src_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: next to the templates).",
)
@click.option("--pattern", default="*.dot", show_default=True, help="Template file glob")
def build(src_dir: Path, out_dir: Optional[Path], pattern: str) -> None:
    """Compile every template in a directory."""
    from dotjsx.compiler.build import build_templates

    console.print(f"🔨 Building templates in [cyan]{escape(str(src_dir))}[/]...")

    summary = build_templates(src_dir, out_dir=out_dir, pattern=pattern)

    for message in summary.failed.values():
        err_console.print(Panel(escape(message), border_style="red", expand=False))

    console.print(
        "✅ Build complete "
        f"(compiled={len(summary.compiled)}, failed={len(summary.failed)}, "
        f"out={escape(str(summary.out_dir))})"
    )
    if not summary.ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()

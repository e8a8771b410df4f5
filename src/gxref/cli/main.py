"""CLI entry point for gxref.

Invoked as::

    gxref [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m gxref.cli.main

Every command takes one or more input paths: Markdown chapters,
directories of chapters, or YAML/JSON corpus files.

Commands
--------
check       Build the grammar and report diagnostics
render      Render grammar rules as Markdown, HTML or plain text
graph       Dump the resolved grammar graph to JSON or YAML
index       List every symbol with its anchor and reference count
lint        Run lint rules against the grammar
version     Show version information
formats     List registered output formats
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from gxref.config import BuildConfig
    from gxref.corpus.records import DocumentRecord
    from gxref.diagnostics.diagnostics import Diagnostic
    from gxref.pipeline import GrammarGraph

console = Console()
err_console = Console(stderr=True)


def _load_or_exit(paths: tuple[str, ...]) -> list["DocumentRecord"]:
    """Load every input path, printing the problem and exiting on failure."""
    from gxref.corpus.loader import CorpusError, load_inputs

    if not paths:
        err_console.print("[red]Error:[/red] No input paths given")
        sys.exit(1)
    try:
        return load_inputs(paths)
    except CorpusError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _config_or_exit(config_path: str | None, **overrides: object) -> "BuildConfig":
    """Read the configuration file (if any) and apply CLI overrides."""
    from gxref.config import BuildConfig, ConfigError, load_config

    try:
        config = load_config(config_path) if config_path else BuildConfig()
        return config.with_overrides(**overrides)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _build(paths: tuple[str, ...], config: "BuildConfig") -> "GrammarGraph":
    from gxref.pipeline import build

    return build(_load_or_exit(paths), config)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


def _diagnostics_table(title: str, diagnostics: list["Diagnostic"]) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Location", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            escape(str(d.location)),
            escape(d.message),
        )
    return table


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    logger = logging.getLogger("gxref")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=err_console, show_path=False))
    logger.setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="gxref")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log build progress to stderr")
def cli(verbose: bool) -> None:
    """Grammar cross-reference toolkit: parse, resolve, link and render grammar rules."""
    _configure_logging(verbose)


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from gxref import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]gxref[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# formats command
# ---------------------------------------------------------------------------


@cli.command(name="formats")
def formats_command() -> None:
    """List all output formats, including those loaded from entry-points."""
    from gxref.renderer.formats import formats

    formats.load_entrypoints()
    console.print("[bold]Registered output formats:[/bold]")
    for name in formats.names():
        console.print(f"  {name}  [dim]{formats.get(name).__name__}[/dim]")


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat unresolved references as errors")
@click.option("--workers", type=int, default=None, help="Threads for parsing and resolution")
@click.option("--config", "config_path", default=None, help="YAML configuration file")
def check_command(
    paths: tuple[str, ...], strict: bool, workers: int | None, config_path: str | None
) -> None:
    """Build the grammar and report duplicate, unresolved and malformed rules.

    PATHS are Markdown chapters, directories or corpus files.
    """
    config = _config_or_exit(config_path, strict=strict or None, workers=workers)
    graph = _build(paths, config)
    collector = graph.diagnostics

    if not collector:
        console.print(
            f"[green]OK[/green] {len(graph.table)} symbol(s), "
            f"{graph.resolution.reference_count} reference(s), no issues found"
        )
        sys.exit(0)

    console.print(_diagnostics_table("Grammar check", collector.diagnostics))
    console.print(
        f"\n[bold]Summary:[/bold] {collector.error_count} error(s), "
        f"{collector.warning_count} warning(s)"
    )

    if collector.has_errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# render command
# ---------------------------------------------------------------------------


@cli.command(name="render")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option("--format", "output_format", default="markdown", help="Output format name")
@click.option(
    "--layout",
    type=click.Choice(["inline", "stacked", "auto"], case_sensitive=False),
    default=None,
    help="How alternatives are laid out",
)
@click.option("--max-width", type=int, default=None, help="Column budget for --layout auto")
@click.option("--symbol", "symbols", multiple=True, help="Render only these symbols")
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def render_command(
    paths: tuple[str, ...],
    output_format: str,
    layout: str | None,
    max_width: int | None,
    symbols: tuple[str, ...],
    config_path: str | None,
    output: str | None,
) -> None:
    """Render every grammar rule with cross-reference links.

    PATHS are Markdown chapters, directories or corpus files.
    """
    from gxref.renderer.formats import formats
    from gxref.renderer.registry import FormatNotFoundError

    formats.load_entrypoints()
    try:
        formatter = formats.create(output_format)
    except FormatNotFoundError as exc:
        err_console.print(
            f"[red]Error:[/red] Unknown format {output_format!r}. "
            f"Available: {', '.join(exc.available)}"
        )
        sys.exit(1)

    config = _config_or_exit(config_path, layout=layout, max_width=max_width)
    graph = _build(paths, config)

    names = list(symbols) if symbols else graph.table.names()
    missing = [n for n in names if n not in graph.table]
    if missing:
        err_console.print(f"[red]Error:[/red] Unknown symbol(s): {', '.join(missing)}")
        sys.exit(1)

    blocks = [formatter.format_rules(graph.rendered_for(name)) for name in names]
    text = "\n\n".join(b for b in blocks if b) + "\n"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Rendered {len(names)} symbol(s) to[/green] {output}")
    else:
        click.echo(text, nl=False)


# ---------------------------------------------------------------------------
# graph command
# ---------------------------------------------------------------------------


@cli.command(name="graph")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Graph output format",
)
@click.option("--config", "config_path", default=None, help="YAML configuration file")
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def graph_command(
    paths: tuple[str, ...], output_format: str, config_path: str | None, output: str | None
) -> None:
    """Dump the resolved grammar graph: symbols, anchors, links and diagnostics.

    PATHS are Markdown chapters, directories or corpus files.
    """
    from gxref.model.serializer import GraphSerializer

    graph = _build(paths, _config_or_exit(config_path))
    serializer = GraphSerializer()

    if output_format.lower() == "json":
        text = serializer.to_json(graph, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(graph)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Graph written to[/green] {output}")
    else:
        syntax = Syntax(text, lang, line_numbers=True)
        console.print(syntax)


# ---------------------------------------------------------------------------
# index command
# ---------------------------------------------------------------------------


@cli.command(name="index")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option("--config", "config_path", default=None, help="YAML configuration file")
def index_command(paths: tuple[str, ...], config_path: str | None) -> None:
    """List every symbol with its canonical anchor and how often it is referenced.

    PATHS are Markdown chapters, directories or corpus files.
    """
    graph = _build(paths, _config_or_exit(config_path))

    table = Table(title="Grammar index")
    table.add_column("Symbol", style="bold")
    table.add_column("Anchor")
    table.add_column("Document")
    table.add_column("Rules", justify="right")
    table.add_column("References", justify="right")

    for name in graph.table.names():
        symbol = graph.table.get(name)
        table.add_row(
            escape(name),
            escape(symbol.anchor),
            escape(symbol.document),
            str(len(symbol.rules)),
            str(len(graph.resolution.links_to(name))),
        )

    console.print(table)
    console.print(f"\n[bold]{len(graph.table)}[/bold] symbol(s)")


# ---------------------------------------------------------------------------
# lint command
# ---------------------------------------------------------------------------


@cli.command(name="lint")
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option("--no-hints", is_flag=True, default=False, help="Suppress HINT-level findings")
@click.option("--config", "config_path", default=None, help="YAML configuration file")
def lint_command(paths: tuple[str, ...], no_hints: bool, config_path: str | None) -> None:
    """Run lint rules against the grammar.

    PATHS are Markdown chapters, directories or corpus files.
    """
    from gxref.linter import GrammarLinter

    config = _config_or_exit(config_path, include_hints=False if no_hints else None)
    graph = _build(paths, config)

    linter = GrammarLinter(include_hints=config.include_hints)
    diagnostics = linter.lint(graph)

    if not diagnostics:
        console.print("[green]OK[/green] no lint issues found")
        sys.exit(0)

    console.print(_diagnostics_table("Grammar lint", diagnostics))
    errors = [d for d in diagnostics if d.is_error]
    console.print(f"\n[bold]{len(diagnostics)}[/bold] lint finding(s)")

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()

# reference_tool/cli/main.py

from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from reference_tool.config.settings import (
    Settings,
    config_file_path,
    default_settings,
    load_settings,
    render_settings,
    save_settings,
)
from reference_tool.errors import ConfigError, ReferenceToolError
from reference_tool.graph.builder import build_network
from reference_tool.graph.io import save_network_graph
from reference_tool.graph.network import CitationNetwork, NetworkStats
from reference_tool.models.reference import Reference
from reference_tool.output.writer import OutputFormat, OutputWriter
from reference_tool.sources.base import PaperSource
from reference_tool.sources.inspire import InspireClient, InspireClientConfig

app = typer.Typer(help="Fetch paper citations and citation networks via the INSPIRE-HEP API.")

logger = logging.getLogger("reference_tool.cli")


@dataclass
class CliState:
    settings: Settings
    console: Console
    arxiv_id: Optional[str]
    output_format: OutputFormat
    output: Optional[Path]
    categories: Optional[List[str]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _configure_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_settings_or_defaults(console: Console) -> Settings:
    try:
        return load_settings()
    except ConfigError as exc:
        console.print(f"[yellow]Warning: could not load configuration, using defaults ({escape(str(exc))})[/yellow]")
        return default_settings()


def _make_source(settings: Settings) -> PaperSource:
    return InspireClient(InspireClientConfig.from_settings(settings))


def _close_source(source: PaperSource) -> None:
    close = getattr(source, "close", None)
    if callable(close):
        close()


def _resolve_output_path(state: CliState, stem: str) -> Optional[Path]:
    """
    --output names a file (or an existing directory); the configured
    default_output_dir is always a directory.
    """
    target = state.settings.effective_output_dir(state.output)
    if target is None:
        return None
    if state.output is None or target.is_dir():
        return target / f"{stem}.{state.output_format.extension}"
    return target


def _filter_by_categories(
    references: List[Reference],
    categories: Optional[List[str]],
) -> List[Reference]:
    if not categories:
        return references
    wanted = set(categories)
    return [r for r in references if wanted.intersection(r.categories)]


def _print_stats(console: Console, stats: NetworkStats) -> None:
    tbl = Table(show_header=True, header_style="bold")
    tbl.add_column("Metric")
    tbl.add_column("Value", justify="right")
    tbl.add_row("Papers", str(stats.total_papers))
    tbl.add_row("Citations", str(stats.total_citations))
    tbl.add_row("Papers with references", str(stats.papers_with_references))
    tbl.add_row("Papers being cited", str(stats.papers_being_cited))
    console.print(tbl)


def _fail(console: Console, message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    arxiv_id: Optional[str] = typer.Option(
        None,
        "--arxiv-id",
        help="ArXiv ID of the paper (e.g. 2301.12345).",
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output format. Defaults to the configured default_format.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path. Defaults to stdout (or default_output_dir).",
    ),
    categories: Optional[str] = typer.Option(
        None,
        "--categories",
        "-c",
        help="Comma-separated categories to keep (e.g. hep-th,hep-ph).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging.",
    ),
) -> None:
    """
    Without a subcommand: fetch the references of --arxiv-id and write them out.
    """
    err_console = Console(stderr=True)
    settings = _load_settings_or_defaults(err_console)

    console = Console(stderr=True, no_color=not settings.ui.use_colors, highlight=False)
    _configure_logging(settings.effective_verbose(verbose), console)

    state = CliState(
        settings=settings,
        console=console,
        arxiv_id=arxiv_id,
        output_format=settings.effective_format(output_format),
        output=output,
        categories=settings.effective_categories(categories),
    )
    ctx.obj = state

    if ctx.invoked_subcommand is None:
        _fetch_references(state)


def _fetch_references(state: CliState) -> None:
    console = state.console
    if not state.arxiv_id:
        _fail(console, "ArXiv ID is required (use --arxiv-id).")

    logger.info("Fetching references for paper: %s", state.arxiv_id)
    source = _make_source(state.settings)
    try:
        paper = source.get_paper_by_external_id(state.arxiv_id)
        console.print(f"Found paper: [bold]{escape(paper.title)}[/bold]")
        references = source.get_paper_references(paper.id)
    except ReferenceToolError as exc:
        _fail(console, str(exc))
    finally:
        _close_source(source)

    references = _filter_by_categories(references, state.categories)
    unresolved = sum(1 for r in references if not r.is_resolved)
    if unresolved:
        console.print(f"{unresolved} reference(s) have no INSPIRE record")

    writer = OutputWriter(state.output_format, _resolve_output_path(state, f"references_{paper.id}"))
    try:
        written = writer.write_references(references)
    except OSError as exc:
        _fail(console, f"Could not write output: {exc}")

    if written is not None:
        console.print(f"Output written to: {written}")
    console.print(f"[green]Successfully processed {len(references)} references[/green]")


@app.command("network")
def network(
    ctx: typer.Context,
    arxiv_id: Optional[str] = typer.Argument(
        None,
        help="ArXiv ID of the root paper (can also be given with --arxiv-id).",
    ),
    depth: Optional[int] = typer.Option(
        None,
        "--depth",
        "-d",
        min=0,
        help="Citation hops to follow (0 = root only). Defaults to default_network_depth.",
    ),
    graph_output: Optional[Path] = typer.Option(
        None,
        "--graph-output",
        "-g",
        help="Also pickle the NetworkX projection of the network to this path.",
    ),
) -> None:
    """
    Build a citation network by following references from a root paper.
    """
    state: CliState = ctx.obj
    console = state.console

    root_id = arxiv_id or state.arxiv_id
    if not root_id:
        _fail(console, "ArXiv ID is required (pass it as an argument or with --arxiv-id).")

    max_depth = state.settings.effective_depth(depth)
    logger.info("Building citation network for paper: %s with depth: %d", root_id, max_depth)

    citation_network = CitationNetwork()
    source = _make_source(state.settings)

    ui = state.settings.ui
    status = (
        console.status("Resolving root paper...", spinner=ui.spinner)
        if ui.show_progress
        else nullcontext()
    )

    try:
        with status as live:
            def _progress(paper_id: str, level: int, count: int) -> None:
                if live is not None:
                    live.update(f"Processing depth {level} (paper {count}): {paper_id}")

            report = build_network(
                citation_network,
                source,
                root_id,
                max_depth,
                progress=_progress,
            )
    except ReferenceToolError as exc:
        _fail(console, str(exc))
    finally:
        _close_source(source)

    root = citation_network.get_paper(report.root_id)
    if root is not None:
        console.print(f"Root paper: [bold]{escape(root.title)}[/bold]")
    if report.failures:
        console.print(
            f"[yellow]{len(report.failures)} paper(s) had references that could not be fetched.[/yellow]"
        )
    _print_stats(console, citation_network.get_stats())

    writer = OutputWriter(state.output_format, _resolve_output_path(state, f"network_{report.root_id}"))
    try:
        written = writer.write_network(citation_network)
        if graph_output is not None:
            graph_path = save_network_graph(citation_network, graph_output)
            console.print(f"Graph written to: {graph_path}")
    except OSError as exc:
        _fail(console, f"Could not write output: {exc}")

    if written is not None:
        console.print(f"Output written to: {written}")
    console.print(f"[green]Built network with {report.paper_count} papers[/green]")


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """
    Show the effective configuration.
    """
    state: CliState = ctx.obj
    typer.echo(f"# Configuration file: {config_file_path()}")
    typer.echo(render_settings(state.settings))


@app.command("init-config")
def init_config(ctx: typer.Context) -> None:
    """
    Write the default configuration file (overwrites an existing one).
    """
    state: CliState = ctx.obj
    try:
        path = save_settings(default_settings())
    except OSError as exc:
        _fail(state.console, f"Could not write configuration: {exc}")
    state.console.print(f"Configuration saved to: {path}")


if __name__ == "__main__":
    app()

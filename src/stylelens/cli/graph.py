"""Graph command — inspect the stylesheet import graph of a project."""

import json
import os
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import StylelensError
from ..graph import DependencyGraph, GraphQueryEngine, build_dependency_graph
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


@app.command()
def graph(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory to scan for .scss/.css files",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress logging"),
    log_file: Optional[Path] = typer.Option(
        None, "--log-file", help="Also append log records to this file"
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
):
    """
    Build the stylesheet dependency graph and show who imports what.

    [bold cyan]Examples:[/bold cyan]

      stylelens graph src/

      stylelens graph . --format json
    """
    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(config=config, verbose=verbose, quiet=quiet)
        dep_graph = build_dependency_graph(
            path, settings.ignore_patterns, follow_symlinks=settings.follow_symlinks
        )
        engine = GraphQueryEngine(dep_graph, settings.max_traversal_nodes)

        if fmt == "json":
            _output_json(dep_graph, engine)
        else:
            _output_rich(dep_graph, engine)

    except typer.Exit:
        raise
    except StylelensError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _rel(dep_graph: DependencyGraph, path: str) -> str:
    try:
        return os.path.relpath(path, dep_graph.project_root)
    except ValueError:
        # Different drive on Windows
        return path


def _output_json(dep_graph: DependencyGraph, engine: GraphQueryEngine) -> None:
    output = {
        "summary": asdict(engine.stats()),
        "files": {
            _rel(dep_graph, path): {
                "imports": [_rel(dep_graph, p) for p in engine.direct_imports(path)],
                "imported_by": [_rel(dep_graph, p) for p in engine.direct_importers(path)],
            }
            for path in sorted(dep_graph.files)
        },
        "skipped": {_rel(dep_graph, p): reason for p, reason in sorted(dep_graph.skipped.items())},
    }
    print(json.dumps(output, indent=2))


def _output_rich(dep_graph: DependencyGraph, engine: GraphQueryEngine) -> None:
    stats = engine.stats()

    console.print()
    console.print("[bold cyan]STYLELENS — Stylesheet Graph[/bold cyan]")
    console.print()
    console.print(
        f"  [green]{stats.file_count}[/green] stylesheets, "
        f"[green]{stats.edge_count}[/green] imports "
        f"({stats.avg_imports_per_file:.2f} per file)"
    )
    if stats.skipped_count:
        console.print(f"  [yellow]{stats.skipped_count} unreadable files skipped[/yellow]")

    if not dep_graph.files:
        console.print("  [yellow]No .scss or .css files found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("File")
    table.add_column("Imports", justify="right")
    table.add_column("Imported by", justify="right")
    table.add_column("Direct imports")

    # Most-imported partials first: they are the usual root causes
    ordered = sorted(
        dep_graph.files, key=lambda p: (-len(dep_graph.imported_by.get(p, ())), p)
    )
    for path in ordered:
        direct = engine.direct_imports(path)
        table.add_row(
            escape(_rel(dep_graph, path)),
            str(len(direct)),
            str(len(dep_graph.imported_by.get(path, ()))),
            escape(", ".join(_rel(dep_graph, p) for p in direct)),
        )

    console.print()
    console.print(table)

"""Optimize command — collapse duplicate findings in a results document."""

import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..exceptions import InvalidPathError, StylelensError
from ..logging_config import setup_logging
from ..optimizer import (
    Finding,
    OptimizationStats,
    format_impact_annotation,
    optimization_summary,
    optimize_results,
)
from . import app
from ._common import console, resolve_config


@app.command()
def optimize(
    results_file: Path = typer.Argument(
        ...,
        help="JSON results document (with issues, entities or components)",
        exists=True,
        file_okay=True,
        dir_okay=False,
    ),
    project: Path = typer.Option(
        Path("."),
        "--project",
        "-p",
        help="Project root whose stylesheets were analyzed",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    min_group_size: Optional[int] = typer.Option(
        None,
        "--min-group-size",
        "-m",
        help="Minimum duplicate findings before collapsing",
        min=1,
    ),
    all_files: bool = typer.Option(
        False,
        "--all-files",
        help="Group findings on every file type, not only stylesheets",
    ),
    fmt: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich (human-readable) or json",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the optimized JSON document to this file",
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
    Collapse findings repeated across stylesheets into root-cause findings.

    [bold cyan]Examples:[/bold cyan]

      stylelens optimize results.json --project src/

      stylelens optimize results.json -p . --format json -o optimized.json
    """
    logger = setup_logging(
        verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None
    )

    try:
        settings = resolve_config(
            config=config,
            min_group_size=min_group_size,
            all_files=all_files,
            verbose=verbose,
            quiet=quiet,
        )
        document = _load_document(results_file)
        optimized = optimize_results(document, project, settings)

        if output is not None:
            output.write_text(json.dumps(optimized, indent=2), encoding="utf-8")

        if fmt == "json":
            print(json.dumps(optimized, indent=2))
        else:
            _output_rich(optimized)

    except typer.Exit:
        raise
    except StylelensError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except Exception as e:
        logger.exception("Unexpected error")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def _load_document(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidPathError(path, f"not valid JSON: {e}")
    if isinstance(data, list):
        # Bare list of findings
        return {"issues": data}
    if not isinstance(data, dict):
        raise InvalidPathError(path, "expected a JSON object or list of findings")
    return data


def _collect_findings(document: dict[str, Any]) -> list[Finding]:
    entities = document.get("entities") or document.get("components")
    if entities:
        return [Finding.from_dict(i) for e in entities for i in e.get("issues") or []]
    return [Finding.from_dict(i) for i in document.get("issues") or []]


def _output_rich(document: dict[str, Any]) -> None:
    meta = document.get("optimization")
    console.print()
    if meta:
        stats = OptimizationStats(
            enabled=meta["enabled"],
            original_issue_count=meta["originalIssueCount"],
            optimized_issue_count=meta["optimizedIssueCount"],
            root_causes_found=meta.get("rootCausesFound", 0),
        )
        console.print(f"[bold]{optimization_summary(stats)}[/bold]")
    else:
        console.print("[yellow]Optimization skipped — findings left unchanged[/yellow]")

    findings = _collect_findings(document)
    if not findings:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Check")
    table.add_column("File")
    table.add_column("Message")
    for finding in findings:
        file_cell = escape(finding.file or "")
        if finding.is_root_cause:
            file_cell = f"[bold green]{file_cell}[/bold green]"
        table.add_row(
            escape(finding.check),
            file_cell,
            escape(finding.message + format_impact_annotation(finding)),
        )

    console.print()
    console.print(table)

"""Audit command: grade already-cleaned output."""

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..api import resolve_catalog
from ..audit import CleaningStats, audit_cleaned_files, render_markdown_report
from ..exceptions import ArchiveCorruptError, PortabilityInsightError
from ..logging_config import setup_logging
from ..scanning import load_archive
from . import app
from ._common import console, read_directory, resolve_config, score_color


@app.command()
def audit(
    path: Path = typer.Argument(
        ...,
        help="Cleaned project directory or zip archive",
        exists=True,
        readable=True,
    ),
    project_name: Optional[str] = typer.Option(
        None,
        "--project-name",
        "-n",
        help="Name used in the report (default: directory or archive name)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write a markdown report to this file",
    ),
    removed_packages: Optional[List[str]] = typer.Option(
        None,
        "--removed-package",
        help="Package removed during cleaning (repeatable)",
    ),
    polyfills: int = typer.Option(
        0,
        "--polyfills",
        help="Number of polyfills generated during cleaning",
        min=0,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        hidden=True,
    ),
    catalog: Optional[Path] = typer.Option(
        None,
        "--catalog",
        help="Pattern catalog override (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
):
    """
    Grade cleaned output for residual platform references (A to F).

    [bold cyan]Examples:[/bold cyan]

      portability-insight audit ./cleaned

      portability-insight audit cleaned.zip --output SOVEREIGNTY_REPORT.md
    """
    logger = setup_logging(verbose=verbose, quiet=json_output and not verbose)

    try:
        settings = resolve_config(config=config, catalog=catalog, verbose=verbose)
        if path.is_dir():
            files = read_directory(path, settings)
        else:
            files = load_archive(path.read_bytes()).files
        logger.info(f"Auditing {len(files)} files from {path}")

        removed = list(removed_packages or [])
        result = audit_cleaned_files(
            files, removed, polyfills, catalog=resolve_catalog(None, settings)
        )

        if output is not None:
            stats = CleaningStats(packages_removed=len(removed), polyfills_generated=polyfills)
            name = project_name or (path.name if path.is_dir() else path.stem)
            output.write_text(render_markdown_report(name, result, stats), encoding="utf-8")

        if json_output:
            print(json.dumps(result.to_dict(), indent=2))
            return

        color = score_color(result.score)
        console.print()
        console.print(
            f"[bold]Sovereignty score:[/bold] [bold {color}]{result.score}/100[/bold {color}]"
            f"  [bold]Grade:[/bold] [bold {color}]{result.grade}[/bold {color}]"
        )
        for issue in result.critical_issues:
            console.print(f"  [red]critical[/red] {escape(issue)}")
        for issue in result.major_issues:
            console.print(f"  [yellow]major[/yellow] {escape(issue)}")
        for text in result.recommendations:
            console.print(f"  [dim]-[/dim] {escape(text)}")
        if output is not None:
            console.print(f"\n[dim]Report written to:[/dim] {output}")
        console.print()

    except ArchiveCorruptError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print("[red]Could not read this archive: check the file.[/red]")
        raise typer.Exit(1)

    except PortabilityInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

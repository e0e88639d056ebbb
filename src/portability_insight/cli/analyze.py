"""Analyze command: score an archive's portability."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from ..api import analyze as run_analysis
from ..exceptions import ArchiveCorruptError, PortabilityInsightError
from ..logging_config import setup_logging
from ..models import AnalysisResult, DependencyStatus, Severity
from . import app
from ._common import console, resolve_config, score_color
from .progress import AnalysisProgress

MAX_ISSUES_SHOWN = 15

SEVERITY_STYLE = {
    Severity.CRITICAL: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "dim",
}

STATUS_STYLE = {
    DependencyStatus.INCOMPATIBLE: "bold red",
    DependencyStatus.WARNING: "yellow",
    DependencyStatus.COMPATIBLE: "green",
}


@app.command()
def analyze(
    archive: Path = typer.Argument(
        ...,
        help="Zip archive of the generated project",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    fail_under: Optional[int] = typer.Option(
        None,
        "--fail-under",
        help="Exit 1 if the portability score is below this value",
        min=0,
        max=100,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every issue and dependency",
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
    Detect platform markers in a project archive and score its portability.

    [bold cyan]Examples:[/bold cyan]

      portability-insight analyze project.zip

      portability-insight analyze project.zip --json

      portability-insight analyze project.zip --fail-under 80
    """
    logger = setup_logging(verbose=verbose, quiet=json_output and not verbose)

    try:
        settings = resolve_config(config=config, catalog=catalog, verbose=verbose)
        blob = archive.read_bytes()

        if json_output:
            result = run_analysis(blob, config=settings)
            print(json.dumps(result.to_dict(include_files=False), indent=2))
        else:
            with AnalysisProgress(console) as progress:
                result = run_analysis(blob, progress, config=settings)
            _output_rich(result, verbose=verbose)

        if fail_under is not None and result.score < fail_under:
            if not json_output:
                console.print(
                    f"[red]--fail-under {fail_under}:[/red] score is {result.score}"
                )
            raise typer.Exit(1)

    except typer.Exit:
        raise

    except ArchiveCorruptError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print("[red]Could not read this archive: check the file.[/red]")
        raise typer.Exit(1)

    except PortabilityInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user")
        console.print("\n[yellow]Analysis interrupted[/yellow]")
        raise typer.Exit(130)


def _output_rich(result: AnalysisResult, verbose: bool = False) -> None:
    """Human-readable Rich terminal output."""
    color = score_color(result.score)
    console.print(
        f"[bold]Portability score:[/bold] [bold {color}]{result.score}/100[/bold {color}]"
    )
    console.print(f"[bold]Platform:[/bold] {result.platform or '[dim]not detected[/dim]'}")
    console.print(
        f"[dim]{result.analyzed_files} source files analyzed "
        f"out of {result.total_files} archive entries[/dim]"
    )
    console.print(
        f"[red]{result.critical_count} critical[/red], "
        f"[yellow]{result.warning_count} warning[/yellow] issues; "
        f"{len(result.incompatible_dependencies)} incompatible dependencies"
    )
    console.print()

    if result.issues:
        table = Table(title=f"Issues ({len(result.issues)})", title_justify="left")
        table.add_column("Severity")
        table.add_column("Location", style="cyan")
        table.add_column("Pattern")
        table.add_column("Description", style="dim")

        shown = result.issues if verbose else result.issues[:MAX_ISSUES_SHOWN]
        for issue in shown:
            location = issue.file if issue.line is None else f"{issue.file}:{issue.line}"
            style = SEVERITY_STYLE[issue.severity]
            table.add_row(
                f"[{style}]{issue.severity.value}[/{style}]",
                escape(location),
                escape(issue.pattern),
                escape(issue.description),
            )
        console.print(table)
        hidden = len(result.issues) - len(shown)
        if hidden > 0:
            console.print(f"  [dim]... and {hidden} more (use --verbose to show all)[/dim]")
        console.print()
    else:
        console.print("[bold green]No proprietary patterns found.[/bold green]")
        console.print()

    deps = (
        result.dependencies
        if verbose
        else [d for d in result.dependencies if d.status is not DependencyStatus.COMPATIBLE]
    )
    if deps:
        table = Table(title="Dependencies", title_justify="left")
        table.add_column("Package", style="cyan")
        table.add_column("Version")
        table.add_column("Status")
        table.add_column("Note", style="dim")
        for dep in deps:
            style = STATUS_STYLE[dep.status]
            table.add_row(
                escape(dep.package),
                escape(dep.version),
                f"[{style}]{dep.status.value}[/{style}]",
                dep.note,
            )
        console.print(table)
        console.print()

    console.print("[bold]Recommendations[/bold]")
    for index, text in enumerate(result.recommendations, start=1):
        console.print(f"  {index}. {escape(text)}")
    console.print()

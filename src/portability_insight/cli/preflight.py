"""Preflight command: report what cleaning an archive would change."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from ..api import resolve_catalog
from ..exceptions import ArchiveCorruptError, PortabilityInsightError
from ..logging_config import setup_logging
from ..preflight import PreflightReport, preflight_files
from ..scanning import load_archive
from . import app
from ._common import console, resolve_config


@app.command()
def preflight(
    archive: Path = typer.Argument(
        ...,
        help="Zip archive of the generated project",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    env_output: Optional[Path] = typer.Option(
        None,
        "--env-output",
        help="Write the generated .env.example to this file",
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
    List the files cleaning would remove or rewrite, without touching them.

    [bold cyan]Examples:[/bold cyan]

      portability-insight preflight project.zip

      portability-insight preflight project.zip --env-output .env.example
    """
    logger = setup_logging(verbose=verbose, quiet=json_output and not verbose)

    try:
        settings = resolve_config(config=config, catalog=catalog, verbose=verbose)
        loaded = load_archive(archive.read_bytes())
        report = preflight_files(
            loaded.files, resolve_catalog(None, settings), config=settings
        )

        if env_output is not None:
            env_output.write_text(report.env_example, encoding="utf-8")

        if json_output:
            print(json.dumps(report.to_dict(), indent=2))
            return

        _output_rich(report)
        if env_output is not None:
            console.print(f"[dim].env.example written to:[/dim] {env_output}")
            console.print()

    except ArchiveCorruptError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print("[red]Could not read this archive: check the file.[/red]")
        raise typer.Exit(1)

    except PortabilityInsightError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _output_rich(report: PreflightReport) -> None:
    console.print()
    _section("Files to remove", report.removable_files)
    _section("Files to clean", report.files_to_clean)
    for path, urls in report.cdn_urls.items():
        for url in urls:
            console.print(f"  [yellow]cdn[/yellow] {escape(path)}: {escape(url)}")
    _section("Polyfills needed", report.polyfills)

    if report.manifest is not None and report.manifest.changed:
        console.print(f"[bold]{escape(report.manifest_path)}[/bold]")
        for change in report.manifest.changes:
            console.print(f"  [dim]-[/dim] {escape(change)}")
        console.print()

    console.print("[bold].env.example[/bold]")
    console.print(escape(report.env_example), highlight=False)


def _section(title: str, items: list) -> None:
    if not items:
        console.print(f"[bold]{title}:[/bold] [green]none[/green]")
        return
    console.print(f"[bold]{title}[/bold] ({len(items)})")
    for item in items:
        console.print(f"  [dim]-[/dim] {escape(item)}")
    console.print()

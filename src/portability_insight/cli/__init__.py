"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="portability-insight",
    help="Portability Insight - detect platform lock-in in generated projects",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Score how portable an AI-generated project is and audit cleaned output.
    """
    if version:
        console.print(
            f"[bold cyan]Portability Insight[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .audit import audit as _audit  # noqa: F401, E402
from .preflight import preflight as _preflight  # noqa: F401, E402

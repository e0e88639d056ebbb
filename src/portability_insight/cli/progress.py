"""Live progress bar for `portability-insight analyze`."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

MAX_MESSAGE_WIDTH = 48


class AnalysisProgress:
    """Renders engine checkpoints as a single progress bar.

    An instance is itself the ``(percent, message)`` callback::

        with AnalysisProgress(console) as progress:
            result = analyze(blob, progress)
    """

    def __init__(self, console: Console | None = None, title: str = "Platform lock-in analysis"):
        self.console = console or Console()
        self.title = title
        self._progress: Progress | None = None
        self._task: TaskID | None = None

    def __enter__(self) -> AnalysisProgress:
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    def __call__(self, percent: int, message: str) -> None:
        self.update(percent, message)

    def start(self) -> None:
        self.console.print(f"\n[bold cyan]PORTABILITY INSIGHT[/] [dim]{self.title}[/]\n")
        self._progress = Progress(
            SpinnerColumn(style="cyan"),
            TextColumn("{task.description}"),
            BarColumn(bar_width=32, finished_style="green"),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
        )
        self._progress.start()
        self._task = self._progress.add_task("Starting...", total=100)

    def update(self, percent: int, message: str) -> None:
        if self._progress is None or self._task is None:
            return
        self._progress.update(self._task, completed=percent, description=_shorten(message))

    def stop(self) -> None:
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        self._task = None
        self.console.print()


def _shorten(message: str) -> str:
    if len(message) <= MAX_MESSAGE_WIDTH:
        return message
    return message[: MAX_MESSAGE_WIDTH - 3] + "..."

"""Progress reporting: a Rich bar over engine callbacks, or nothing."""

from typing import Callable, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

ProgressCallback = Callable[[int, int], None]


class ProgressReporter:
    """Rich progress bar wrapper.

    ``run`` hands the callback an ``on_progress(done, total)`` function that
    advances a single bar; pass it straight to the engine.
    """

    def __init__(self, console: Console, description: str = "Analyzing files"):
        self.console = console
        self.description = description

    def run(self, callback: Callable[[Optional[ProgressCallback]], object]):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task_id = progress.add_task(self.description, total=None)

            def on_progress(done: int, total: int) -> None:
                progress.update(task_id, completed=done, total=total)

            return callback(on_progress)


class SilentReporter:
    """No-op reporter for tests and --quiet mode."""

    def run(self, callback: Callable[[Optional[ProgressCallback]], object]):
        return callback(None)

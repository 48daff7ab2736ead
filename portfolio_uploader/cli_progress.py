"""Console rendering and progress helpers for the portfolio-up CLI."""
from __future__ import annotations

from typing import Any, Dict, Optional
import time

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn
from rich.table import Table

from .models import BatchSummary, UploadOutcome
from .utils.events import ProgressEvent

console = Console()


def render_configuration_summary(config: Dict[str, Any], out: Optional[Console] = None) -> None:
    """Render startup configuration summary."""
    out = out or console
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    out.print(
        Panel(
            table,
            title="[bold green]portfolio-up[/bold green]",
            subtitle="[dim]photo portfolio uploader[/dim]",
            border_style="blue",
        )
    )


class BatchProgressDisplay:
    """
    Event sink for BatchUploadProcess.

    One overwritable bar with percentage and done/total; failures are echoed
    above it as they arrive.
    """

    def __init__(self, out: Optional[Console] = None):
        self._console = out or console
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    def attach(self, process) -> "BatchProgressDisplay":
        process.on("phase", self.on_phase)
        process.on("outcome", self.on_outcome)
        process.on("progress", self.on_progress)
        process.on("finish", self.on_finish)
        return self

    def _start(self, total: int) -> None:
        if self._progress is not None:
            return
        self._progress = Progress(
            TextColumn("[bold cyan]Uploading"),
            BarColumn(bar_width=30),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TextColumn("({task.completed}/{task.total})"),
            TimeElapsedColumn(),
            console=self._console,
            transient=False,
        )
        self._progress.start()
        self._task_id = self._progress.add_task("upload", total=max(total, 1))

    def _stop(self) -> None:
        if self._progress is None:
            return
        self._progress.stop()
        self._progress = None
        self._task_id = None

    def on_phase(self, name: str, message: str) -> None:
        stamp = time.strftime("%H:%M:%S")
        self._console.print(f"[dim]{stamp}[/dim] [blue]{name:<9}[/blue] {escape(message)}")

    def on_outcome(self, outcome: UploadOutcome) -> None:
        if outcome.failed:
            self._console.print(f"[red]✗ {outcome.identifier}[/red]: {outcome.reason}")
        elif not outcome.success:
            name = outcome.file_path.name if outcome.file_path else outcome.identifier
            self._console.print(f"[yellow]Skipped duplicate[/yellow]: {name}")

    def on_progress(self, event: ProgressEvent) -> None:
        self._start(event.total)
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, completed=event.done, total=max(event.total, 1))
        if event.finished:
            self._stop()

    def on_finish(self, summary: BatchSummary) -> None:
        self._stop()
        if summary.total == 0:
            return
        if summary.success:
            self._console.print(f"[green]Upload complete[/green]: {summary.completed} uploaded")
            return
        self._console.print(
            f"[bold red]Upload completed with {len(summary.failed)} failures[/bold red]: "
            + ", ".join(summary.failed)
        )

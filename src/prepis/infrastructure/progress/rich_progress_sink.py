"""Interactive terminal progress bar."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

from prepis.domain.ports import ProgressSink
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot

_REFRESH_PER_SECOND = 10


class RichProgressSink(ProgressSink):
    """Render upload progress as a rich progress bar.

    The bar is started on the first snapshot and stopped by `finish`.
    Indeterminate transfers show a spinner with elapsed time and byte count.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress: Progress | None = None
        self._task_id: TaskID | None = None

    def render(self, snapshot: ProgressSnapshot) -> None:
        progress, task_id = self._ensure_started(snapshot)
        progress.update(task_id, completed=snapshot.bytes_done)

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        if self._progress is not None and self._task_id is not None:
            self._progress.update(self._task_id, completed=snapshot.bytes_done)
            self._progress.stop()
        self._progress = None
        self._task_id = None

        if outcome is ProgressOutcome.SUCCESS:
            self._console.print(
                f"[green]{snapshot.label} uploaded successfully in {snapshot.elapsed:.1f}s[/green]"
            )
        else:
            self._console.print(f"[red]Upload of {snapshot.label} was interrupted[/red]")

    def _ensure_started(self, snapshot: ProgressSnapshot) -> tuple[Progress, TaskID]:
        if self._progress is not None and self._task_id is not None:
            return self._progress, self._task_id

        if snapshot.indeterminate:
            columns = (
                SpinnerColumn(),
                TimeElapsedColumn(),
                TextColumn("Uploading [bold]{task.description}[/bold]"),
                DownloadColumn(),
                TransferSpeedColumn(),
            )
        else:
            columns = (
                SpinnerColumn(),
                TimeElapsedColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(bar_width=40),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
            )

        progress = Progress(
            *columns,
            console=self._console,
            refresh_per_second=_REFRESH_PER_SECOND,
        )
        progress.start()
        task_id = progress.add_task(snapshot.label, total=snapshot.bytes_total)
        self._progress = progress
        self._task_id = task_id
        return progress, task_id


__all__ = ["RichProgressSink"]

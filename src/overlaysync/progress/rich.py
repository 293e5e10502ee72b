"""Rich-based bootstrap progress display."""

from __future__ import annotations

from types import TracebackType
from typing import ClassVar

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from overlaysync.contracts.progress import BootstrapProgress


class RichBootstrapProgress(BootstrapProgress):
    """Live terminal display of the scope bootstrap phases.

    Use as a context manager around ``MapScope.mount()``::

        with RichBootstrapProgress() as progress:
            scope = MapScope(config, target, loader=loader, progress=progress)
            await scope.mount()
    """

    _PHASE_LABELS: ClassVar[dict[str, str]] = {
        "engine": "[cyan]Engine[/]",
        "extensions": "[blue]Extensions[/]",
        "map": "[green]Map[/]",
    }

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(finished_text="[green]✓[/green]"),
            TextColumn("{task.description:>12}"),
            BarColumn(bar_width=24),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console or Console(stderr=True),
            transient=False,
        )
        self._task_ids: dict[str, RichTaskID] = {}

    def __enter__(self) -> RichBootstrapProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self._task_ids[phase] = self._progress.add_task(self._PHASE_LABELS.get(phase, phase), total=total)

    def item_done(self, phase: str) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is not None:
            self._progress.advance(task_id)

    def phase_done(self, phase: str) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is None:
            return
        total = self._progress.tasks[task_id].total
        if total is None:
            self._progress.update(task_id, total=1, completed=1)
        else:
            self._progress.update(task_id, completed=total)

    def phase_error(self, phase: str, error: BaseException) -> None:
        task_id = self._task_ids.get(phase)
        if task_id is not None:
            self._progress.update(task_id, description=f"[red]✗[/red] {phase:>10}")

    def completed(self, phase: str) -> float | None:
        """Completed units of *phase*, or ``None`` if it never started."""
        task_id = self._task_ids.get(phase)
        return None if task_id is None else self._progress.tasks[task_id].completed

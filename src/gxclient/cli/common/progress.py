"""Progress display for jobs being polled by the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from gxclient.core.jobs import JobProgress, JobStatus, ProgressReporter

console = Console()
_MAX_LABEL_WIDTH = 56


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _style_for(status: JobStatus | None) -> str:
    if status == JobStatus.COMPLETED:
        return "green"
    if status in (JobStatus.TERMINATED_BY_ERROR, JobStatus.TERMINATED_BY_REQUEST):
        return "red"
    if status in (JobStatus.CREATED, JobStatus.RUNNING, JobStatus.PAUSED):
        return "yellow"
    return "dim"


@contextmanager
def job_progress(label: str) -> Iterator[ProgressReporter]:
    """
    Show a live row for one job while it is polled.

    Yields a reporter to pass to the client; every observation updates the
    status text and, when the platform reports one, the percentage bar.
    """
    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[label]}[/]"),
        TextColumn("job={task.fields[job_id]}"),
        TextColumn(
            "status=[{task.fields[style]}]{task.fields[status]}[/{task.fields[style]}]"
        ),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    task_id = progress.add_task(
        "",
        total=100,
        label=_truncate(label, _MAX_LABEL_WIDTH),
        job_id="-",
        status="SUBMITTED",
        style="dim",
    )

    def report(observation: JobProgress) -> None:
        fields = {
            "job_id": observation.job_id,
            "status": observation.label,
            "style": _style_for(observation.status),
        }
        if observation.status is not None and observation.status.is_terminal:
            progress.update(task_id, completed=100, **fields)
        elif observation.percent is not None:
            progress.update(task_id, completed=max(0, min(observation.percent, 100)), **fields)
        else:
            progress.update(task_id, **fields)

    with progress:
        yield report

"""Output formatting utilities for the CLI."""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from gxclient.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM
from gxclient.core.envelope import advisory_message
from gxclient.core.jobs import JobStatus
from gxclient.core.tables import Table as DataTable

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def response_values(response: Any) -> Any:
    """Return the `values` payload of a response, decoding embedded JSON text."""
    if not isinstance(response, Mapping):
        return None
    values = response.get("values")
    if isinstance(values, str):
        try:
            return json.loads(values)
        except json.JSONDecodeError:
            return values
    return values


def element_names(response: Any) -> list[tuple[str, str]]:
    """Extract (name, class) pairs from a folder listing."""
    values = response_values(response)
    if isinstance(values, Mapping):
        values = values.get("names", [])
    if not isinstance(values, list):
        return []
    rows: list[tuple[str, str]] = []
    for item in values:
        if isinstance(item, Mapping):
            rows.append((str(item.get("name", "")), str(item.get("class", "") or "")))
        else:
            rows.append((str(item), ""))
    return rows


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts consistently."""
        return f"[GX] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def json(self, payload: Any) -> None:
        """Print a response as highlighted JSON."""
        console.print_json(json.dumps(payload, default=str))

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Returns:
            True if the user confirms, False otherwise.
        """
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def advisory(self, response: Any) -> bool:
        """Print the platform advisory of a response; returns True if there was one."""
        message = advisory_message(response)
        if message is None:
            return False
        self.warn(f"Platform: {message}")
        return True

    def elements_table(self, response: Any, title: str = "Elements") -> None:
        """Render a folder listing response."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Type", style="meta")

        for name, kind in element_names(response):
            t.add_row(name, kind)

        console.print(t)

    def names_table(self, response: Any, title: str, column: str = "Name") -> None:
        """Render a list of names (applications, importers, exporters)."""
        t = Table(title=title, show_lines=False)
        t.add_column(column, style="ok")

        values = response_values(response)
        for item in values if isinstance(values, list) else []:
            if isinstance(item, Mapping):
                item = item.get("name") or item.get("title") or json.dumps(item)
            t.add_row(str(item))

        console.print(t)

    def data_table(self, table: DataTable, title: str = "Table", limit: int | None = None) -> None:
        """Render decoded table rows."""
        t = Table(title=title, show_lines=False)
        for col in table.columns:
            t.add_column(f"{col.name}\n[meta]{col.type.value}[/]")

        rows = table.rows if limit is None else table.rows[:limit]
        for row in rows:
            t.add_row(*("" if cell is None else str(cell) for cell in row))

        console.print(t)
        if limit is not None and len(table.rows) > limit:
            console.print(f"[meta]… {len(table.rows) - limit} more row(s)[/]")

    def job_result(self, job_id: str | None, response: Any) -> None:
        """Summarize a final job-control response."""
        raw = response.get("status") if isinstance(response, Mapping) else None
        status = JobStatus.from_value(raw)
        label = status.name if status is not None else f"UNKNOWN({raw!r})"
        style = "ok" if status == JobStatus.COMPLETED else "err"

        t = Table(title="Job", show_lines=False)
        t.add_column("Job ID", style="ok", no_wrap=True)
        t.add_column("Status")
        t.add_column("Results", style="meta")

        results: Iterable[Any] = []
        if isinstance(response, Mapping) and isinstance(response.get("results"), list):
            results = response["results"]
        t.add_row(
            str(job_id or ""),
            f"[{style}]{label}[/{style}]",
            "\n".join(str(r) for r in results),
        )
        console.print(t)


out = Out()

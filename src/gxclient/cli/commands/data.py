"""Commands for workspace folders, projects and tables."""

from __future__ import annotations

import csv
from pathlib import Path

import typer

from gxclient.cli.common.context import AppContext, build_context
from gxclient.cli.common.exits import (
    EXIT_FAILURE,
    bad_params,
    die,
    exit_from_exc,
    ok_exit,
    warn_exit,
)
from gxclient.cli.common.options import ConfirmOpt, JsonOpt, ProfileOpt, VerboseOpt
from gxclient.cli.common.output import element_names, out
from gxclient.core.errors import GxError
from gxclient.core.tables import ColumnDef, ColumnType

app = typer.Typer(
    help="Workspace folders, projects and tables.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize data context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_context(profile, verbose=verbose)


@app.command("ls")
def list_folder(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="Folder path, e.g. data/Projects/Demo/Data"),
    as_json: bool = JsonOpt,
):
    """List the elements of a folder."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Loading folder..."):
            response = appctx.client.list(folder)
    except GxError as exc:
        exit_from_exc(exc)

    if as_json:
        out.json(response)
        return
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    if not element_names(response):
        warn_exit("Folder is empty")
    out.elements_table(response, title=folder)


@app.command("mkdir")
def make_folder(
    ctx: typer.Context,
    parent: str = typer.Argument(..., help="Parent folder path"),
    name: str = typer.Argument(..., help="New folder name"),
):
    """Create a folder."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.create_folder(parent, name)
    except GxError as exc:
        exit_from_exc(exc)
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.success(f"Created {parent}/{name}")


@app.command("rm")
def remove(
    ctx: typer.Context,
    folder: str = typer.Argument(..., help="Folder containing the element"),
    name: str = typer.Argument(..., help="Element name"),
    confirm: bool = ConfirmOpt,
):
    """Delete a data element. Data may be irrecoverably lost."""
    appctx: AppContext = ctx.obj
    if confirm and not out.confirm(f"Delete {folder}/{name}?"):
        ok_exit("Cancelled")
    try:
        response = appctx.client.delete_element(folder, name)
    except GxError as exc:
        exit_from_exc(exc)
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.success(f"Deleted {folder}/{name}")


@app.command("project")
def create_project(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Project name"),
    description: str = typer.Option("", "--description", help="Project description"),
):
    """Create a project in the workspace."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.create_project(
            {"project": name, "description": description}
        )
    except GxError as exc:
        exit_from_exc(exc)
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.success(f"Project {name} created")


@app.command("table")
def show_table(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Table path"),
    limit: int = typer.Option(50, "--limit", help="Maximum rows to show"),
    as_json: bool = JsonOpt,
):
    """Show a table."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Loading table..."):
            if as_json:
                out.json(appctx.client.get_table(path))
                return
            table = appctx.client.read_table(path)
    except GxError as exc:
        exit_from_exc(exc)

    if table is None:
        die(f"Platform did not return table data for {path}")
    out.data_table(table, title=path, limit=limit)


def _infer_type(values: list[str]) -> ColumnType:
    """Guess a column type from CSV cells."""
    cells = [v for v in values if v != ""]
    if not cells:
        return ColumnType.TEXT
    try:
        for v in cells:
            int(v)
        return ColumnType.INTEGER
    except ValueError:
        pass
    try:
        for v in cells:
            float(v)
        return ColumnType.FLOAT
    except ValueError:
        return ColumnType.TEXT


def _convert(value: str, col_type: ColumnType):
    if value == "":
        return None
    if col_type == ColumnType.INTEGER:
        return int(value)
    if col_type == ColumnType.FLOAT:
        return float(value)
    return value


def read_csv_table(path: Path, delimiter: str = ",") -> tuple[list[ColumnDef], list[list]]:
    """Read a CSV file with a header row into column definitions and typed rows."""
    with path.open(newline="", encoding="utf-8") as fh:
        reader = csv.reader(fh, delimiter=delimiter)
        try:
            header = next(reader)
        except StopIteration as exc:
            raise ValueError(f"{path} is empty") from exc
        raw_rows = [row for row in reader if row]

    columns = [
        ColumnDef(name=name, type=_infer_type([r[i] for r in raw_rows if i < len(r)]))
        for i, name in enumerate(header)
    ]
    rows = [
        [_convert(cell, columns[i].type) for i, cell in enumerate(row)] for row in raw_rows
    ]
    return columns, rows


@app.command("put-table")
def put_table(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file with header"),
    path: str = typer.Argument(..., help="Platform path of the new table"),
    delimiter: str = typer.Option(",", "--delimiter", help="CSV delimiter"),
):
    """Create a table from a CSV file."""
    appctx: AppContext = ctx.obj
    try:
        columns, rows = read_csv_table(source, delimiter=delimiter)
    except ValueError as exc:
        bad_params(exc)

    try:
        with out.status("Uploading table..."):
            response = appctx.client.put_table(path, rows, columns)
    except GxError as exc:
        exit_from_exc(exc)
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.success(f"Table {path} created ({len(rows)} row(s), {len(columns)} column(s))")

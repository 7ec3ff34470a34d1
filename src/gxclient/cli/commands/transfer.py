"""Commands for importing files into and exporting elements from the workspace."""

from __future__ import annotations

from pathlib import Path

import typer

from gxclient.cli.common.context import AppContext, build_context, parse_params
from gxclient.cli.common.exits import (
    EXIT_FAILURE,
    bad_params,
    exit_from_exc,
    polling_stopped,
)
from gxclient.cli.common.options import (
    JsonOpt,
    ParamsOpt,
    ProfileOpt,
    VerboseOpt,
    WaitOpt,
)
from gxclient.cli.common.output import out
from gxclient.cli.common.progress import job_progress
from gxclient.core.errors import GxError, PollingError
from gxclient.core.jobs import JobStatus

app = typer.Typer(
    help="Import and export data.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize transfer context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_context(profile, verbose=verbose)


@app.command("importers")
def importers(ctx: typer.Context, as_json: bool = JsonOpt):
    """List available importers."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.list_importers()
    except GxError as exc:
        exit_from_exc(exc)
    if as_json:
        out.json(response)
        return
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.names_table(response, title="Importers", column="Importer")


@app.command("exporters")
def exporters(ctx: typer.Context, as_json: bool = JsonOpt):
    """List available exporters."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.list_exporters()
    except GxError as exc:
        exit_from_exc(exc)
    if as_json:
        out.json(response)
        return
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.names_table(response, title="Exporters", column="Exporter")


@app.command("import-params")
def import_params(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Target folder"),
    importer: str = typer.Argument(..., help="Importer name"),
):
    """Show the parameters of an importer."""
    appctx: AppContext = ctx.obj
    try:
        out.json(appctx.client.get_importer_parameters(path, importer))
    except GxError as exc:
        exit_from_exc(exc)


@app.command("export-params")
def export_params(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Element to export"),
    exporter: str = typer.Argument(..., help="Exporter name"),
):
    """Show the parameters of an exporter."""
    appctx: AppContext = ctx.obj
    try:
        out.json(appctx.client.get_exporter_parameters(path, exporter))
    except GxError as exc:
        exit_from_exc(exc)


@app.command("import")
def import_file(
    ctx: typer.Context,
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file"),
    parent: str = typer.Argument(..., help="Folder to import into"),
    importer: str = typer.Option(..., "--importer", "-i", help="Importer name"),
    params: str | None = ParamsOpt,
    wait: bool = WaitOpt,
):
    """Upload and import a file."""
    appctx: AppContext = ctx.obj
    try:
        parameters = parse_params(params)
    except ValueError as exc:
        bad_params(exc)

    client = appctx.client
    try:
        if wait:
            with job_progress(f"import {source.name}") as reporter:
                previous, client.reporter = client.reporter, reporter
                try:
                    response = client.import_file(
                        str(source), parent, importer, parameters, wait=True, progress=True
                    )
                finally:
                    client.reporter = previous
        else:
            response = client.import_file(str(source), parent, importer, parameters, wait=False)
    except PollingError as exc:
        polling_stopped(exc)
    except GxError as exc:
        exit_from_exc(exc)

    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    if not wait:
        out.success(f"Import of {source.name} submitted")
        out.kv({"job": response.get("jobID", "")})
        return
    out.job_result(None, response)
    if JobStatus.from_value(response.get("status")) != JobStatus.COMPLETED:
        raise typer.Exit(EXIT_FAILURE)


@app.command("export")
def export(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Element to export"),
    target: Path = typer.Argument(..., dir_okay=False, help="Output file"),
    exporter: str = typer.Option(..., "--exporter", "-e", help="Exporter name"),
    params: str | None = ParamsOpt,
):
    """Export an element into a local file."""
    appctx: AppContext = ctx.obj
    try:
        parameters = parse_params(params)
    except ValueError as exc:
        bad_params(exc)

    try:
        with out.status(f"Exporting {path}..."), target.open("wb") as sink:
            written = appctx.client.export(path, exporter, sink, parameters)
    except GxError as exc:
        target.unlink(missing_ok=True)
        exit_from_exc(exc)

    out.success(f"Wrote {written} byte(s) to {target}")

"""Commands for analysis tools, workflows and jobs."""

import typer

from gxclient.cli.common.context import AppContext, build_context, parse_params
from gxclient.cli.common.exits import (
    EXIT_FAILURE,
    bad_params,
    exit_from_exc,
    ok_exit,
    polling_stopped,
)
from gxclient.cli.common.options import (
    JsonOpt,
    ParamsOpt,
    ProfileOpt,
    TimeoutOpt,
    VerboseOpt,
    WaitOpt,
)
from gxclient.cli.common.output import out
from gxclient.cli.common.progress import job_progress
from gxclient.core.errors import GxError, PollingError
from gxclient.core.jobs import JobStatus

app = typer.Typer(
    help="Run analyses and workflows, monitor jobs.",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    profile: str | None = ProfileOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize jobs context."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)
    ctx.obj = build_context(profile, verbose=verbose)


def _exit_for_status(response) -> None:
    """Exit non-zero unless the job completed."""
    status = JobStatus.from_value(response.get("status") if isinstance(response, dict) else None)
    if status != JobStatus.COMPLETED:
        raise typer.Exit(EXIT_FAILURE)


@app.command("apps")
def list_apps(ctx: typer.Context, as_json: bool = JsonOpt):
    """List available analysis tools."""
    appctx: AppContext = ctx.obj
    try:
        with out.status("Loading analyses..."):
            response = appctx.client.list_applications()
    except GxError as exc:
        exit_from_exc(exc)
    if as_json:
        out.json(response)
        return
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.names_table(response, title="Analyses", column="Analysis")


@app.command("params")
def analysis_params(
    ctx: typer.Context,
    app_name: str = typer.Argument(..., help="Analysis name as listed by `gx jobs apps`"),
):
    """Show the parameter definition of an analysis."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.get_analysis_parameters(app_name)
    except GxError as exc:
        exit_from_exc(exc)
    out.json(response)


@app.command("run")
def run(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Analysis name, or workflow path with --workflow"),
    params: str | None = ParamsOpt,
    workflow: bool = typer.Option(False, "--workflow", help="NAME is a workflow path"),
    wait: bool = WaitOpt,
    timeout: float | None = TimeoutOpt,
):
    """
    Run an analysis or workflow.
    """
    appctx: AppContext = ctx.obj
    try:
        parameters = parse_params(params)
    except ValueError as exc:
        bad_params(exc)

    client = appctx.client
    try:
        if not wait:
            response = client.analyze(name, parameters, is_workflow=workflow, wait=False)
            if out.advisory(response):
                raise typer.Exit(EXIT_FAILURE)
            out.success(f"Submitted {name}")
            out.kv({"job": response.get("jobID", "")})
            return

        seen: dict[str, str] = {}

        with job_progress(name) as reporter:

            def track(observation):
                seen["job_id"] = observation.job_id
                reporter(observation)

            previous, client.reporter = client.reporter, track
            try:
                response = client.analyze(
                    name,
                    parameters,
                    is_workflow=workflow,
                    wait=True,
                    progress=True,
                    timeout=timeout,
                )
            finally:
                client.reporter = previous
    except PollingError as exc:
        polling_stopped(exc)
    except GxError as exc:
        exit_from_exc(exc)

    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.job_result(seen.get("job_id"), response)
    _exit_for_status(response)


@app.command("status")
def status(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    as_json: bool = JsonOpt,
):
    """Show the current status of a job."""
    appctx: AppContext = ctx.obj
    try:
        response = appctx.client.get_job_status(job_id)
    except GxError as exc:
        exit_from_exc(exc)
    if as_json:
        out.json(response)
        return
    if out.advisory(response):
        raise typer.Exit(EXIT_FAILURE)
    out.job_result(job_id, response)


@app.command("wait")
def wait_job(
    ctx: typer.Context,
    job_id: str = typer.Argument(..., help="Job id"),
    timeout: float | None = TimeoutOpt,
):
    """Wait for a submitted job to finish."""
    appctx: AppContext = ctx.obj
    client = appctx.client
    try:
        with job_progress(job_id) as reporter:
            previous, client.reporter = client.reporter, reporter
            try:
                response = client.wait_for_job(job_id, progress=True, timeout=timeout)
            finally:
                client.reporter = previous
    except KeyboardInterrupt:
        ok_exit(f"Stopped waiting; job {job_id} keeps running on the platform")
    except PollingError as exc:
        polling_stopped(exc)
    except GxError as exc:
        exit_from_exc(exc)

    out.job_result(job_id, response)
    _exit_for_status(response)

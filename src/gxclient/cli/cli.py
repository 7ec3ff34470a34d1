"""CLI application for the genexplain platform client."""

import typer

from gxclient.cli.commands.data import app as data_app
from gxclient.cli.commands.jobs import app as jobs_app
from gxclient.cli.commands.transfer import app as transfer_app

app = typer.Typer(
    help="gx - genexplain platform client",
    no_args_is_help=True,
)

app.add_typer(data_app, name="data", help="Folders, projects and tables.")
app.add_typer(jobs_app, name="jobs", help="Run analyses / workflows and monitor jobs.")
app.add_typer(transfer_app, name="transfer", help="Import and export data.")


if __name__ == "__main__":
    app()

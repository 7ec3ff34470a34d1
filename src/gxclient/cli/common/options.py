"""Common CLI options for the CLI."""

import typer

ProfileOpt = typer.Option(
    None,
    "--profile",
    "-p",
    help="Profile name (from ~/.gxclientcfg)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Print a status line for every poll attempt",
)

ParamsOpt = typer.Option(
    None,
    "--params",
    help="Parameters as a JSON object, or @file.json",
)

WaitOpt = typer.Option(
    True,
    "--wait/--no-wait",
    help="Wait until the job reaches a terminal state",
)

TimeoutOpt = typer.Option(
    None,
    "--timeout",
    help="Maximum seconds to wait for the job",
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before deleting",
)

JsonOpt = typer.Option(
    False,
    "--json",
    help="Print the raw platform response as JSON",
)

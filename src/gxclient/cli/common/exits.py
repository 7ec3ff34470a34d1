"""Exit handling for gx commands.

Exit codes:
    0   success
    1   failure, platform refusal, or a job that did not complete
    2   invalid command parameters
    3   polling stopped before a terminal state (timeout, cancel, unknown status)
"""

from typing import NoReturn

import typer

from gxclient.cli.common.output import out

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_PARAMS = 2
EXIT_POLLING_STOPPED = 3


def ok_exit(msg: str | None = None) -> NoReturn:
    """Exit successfully with an optional informational message."""
    if msg:
        out.info(msg)
    raise typer.Exit(EXIT_OK)


def die(msg: str, code: int = EXIT_FAILURE) -> NoReturn:
    """Exit with an error message and optional exit code."""
    out.error(msg)
    raise typer.Exit(code)


def warn_exit(msg: str, code: int = EXIT_OK) -> NoReturn:
    """Exit with a warning message and optional exit code."""
    out.warn(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str | None = None, code: int = EXIT_FAILURE) -> NoReturn:
    """Print an error message (the exception text by default) and exit, chaining `exc`."""
    out.error(message or str(exc))
    raise typer.Exit(code) from exc


def bad_params(exc: Exception) -> NoReturn:
    """Exit for parameters that could not be parsed."""
    exit_from_exc(exc, code=EXIT_BAD_PARAMS)


def polling_stopped(exc: Exception) -> NoReturn:
    """Exit for a poll loop that stopped before the job finished."""
    exit_from_exc(exc, code=EXIT_POLLING_STOPPED)

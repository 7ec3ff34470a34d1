"""High-level client for the platform web API.

GxClient is the operation surface callers use: folders, tables, analyses,
workflows, jobs, imports and exports. Every operation returns the decoded
platform response as-is, so platform advisories (denials, validation
errors, missing elements) are results to inspect rather than exceptions.
Only transport failures and programming errors raise.

The client holds no per-invocation state. The connection reference is the
only shared mutable field; it is guarded by a lock and read once at the
start of each operation, so swapping it does not affect polling that is
already in progress.
"""

from __future__ import annotations

import threading
from typing import Any, BinaryIO, Iterable, Mapping, Sequence

from rich.console import Console

from gxclient.core import invocation, transfer
from gxclient.core.connection import Connection, query
from gxclient.core.endpoints import Endpoint
from gxclient.core.errors import InternalError
from gxclient.core.jobs import JobProgress, ProgressReporter
from gxclient.core.tables import ColumnDef, Table, decode_table, encode_put_table

# access.service command codes of the /web/data service
_CMD_CREATE_FOLDER = "25"
_CMD_DELETE_ELEMENT = "26"
_CMD_LIST = "29"

_stderr = Console(stderr=True)


def console_reporter(progress: JobProgress) -> None:
    """Print one status line per poll attempt."""
    percent = f" {progress.percent}%" if progress.percent is not None else ""
    _stderr.print(
        f"[dim]job[/] {progress.job_id} [dim]#{progress.attempt}[/] {progress.label}{percent}"
    )


class GxClient:
    """Client for folder, table, analysis, job and transfer operations."""

    def __init__(
        self,
        connection: Connection,
        *,
        verbose: bool = False,
        reporter: ProgressReporter | None = None,
        poll_interval: float = invocation.DEFAULT_POLL_INTERVAL,
        timeout: float | None = None,
        max_unknown_polls: int | None = invocation.DEFAULT_MAX_UNKNOWN_POLLS,
    ):
        if connection is None:
            raise InternalError("A connection is required")
        self._lock = threading.Lock()
        self._connection = connection
        self._verbose = verbose
        self.reporter = reporter
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.max_unknown_polls = max_unknown_polls

    # configuration

    @property
    def connection(self) -> Connection:
        with self._lock:
            return self._connection

    @connection.setter
    def connection(self, connection: Connection) -> None:
        if connection is None:
            raise InternalError("A connection is required")
        with self._lock:
            self._connection = connection

    def set_connection(self, connection: Connection) -> GxClient:
        """Replace the connection used for subsequent operations."""
        self.connection = connection
        return self

    @property
    def verbose(self) -> bool:
        return self._verbose

    @verbose.setter
    def verbose(self, verbose: bool) -> None:
        self._verbose = bool(verbose)

    def set_verbose(self, verbose: bool) -> GxClient:
        """Toggle per-poll status output."""
        self.verbose = verbose
        return self

    def _poll_options(self, **overrides: Any) -> dict[str, Any]:
        options: dict[str, Any] = {
            "poll_interval": self.poll_interval,
            "timeout": self.timeout,
            "max_unknown_polls": self.max_unknown_polls,
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return options

    def _reporter(self, progress: bool) -> ProgressReporter | None:
        if not (progress or self._verbose):
            return None
        return self.reporter or console_reporter

    # workspace

    def create_project(self, params: Mapping[str, str]) -> Any:
        """Create a project; `params` are passed to the platform unchanged."""
        return query(self.connection, Endpoint.CREATE_PROJECT, dict(params))

    def create_folder(self, path: str, name: str) -> Any:
        """Create folder `name` inside `path`."""
        return query(
            self.connection,
            Endpoint.CREATE_FOLDER,
            {"service": "access.service", "command": _CMD_CREATE_FOLDER, "dc": path, "de": name},
        )

    def delete_element(self, folder: str, name: str) -> Any:
        """Delete element `name` from `folder`. Data may be irrecoverably lost."""
        return query(
            self.connection,
            Endpoint.DELETE_ELEMENT,
            {"service": "access.service", "command": _CMD_DELETE_ELEMENT, "dc": folder, "de": name},
        )

    def list(self, folder: str) -> Any:
        """List the elements of a folder."""
        return query(
            self.connection,
            Endpoint.LIST,
            {"service": "access.service", "command": _CMD_LIST, "dc": folder},
        )

    # tables

    def get_table_columns(self, table_path: str) -> Any:
        return query(self.connection, Endpoint.TABLE_COLUMNS, {"de": table_path})

    def get_table(self, table_path: str) -> Any:
        """Return the raw table data response (column-major `values`)."""
        return query(self.connection, Endpoint.TABLE_DATA, {"de": table_path})

    def read_table(self, table_path: str) -> Table | None:
        """Fetch columns and data of a table; None if the platform declined."""
        connection = self.connection
        columns = query(connection, Endpoint.TABLE_COLUMNS, {"de": table_path})
        data = query(connection, Endpoint.TABLE_DATA, {"de": table_path})
        return decode_table(data, columns)

    def put_table(
        self,
        path: str,
        data: Iterable[Sequence[Any]],
        columns: Sequence[ColumnDef],
    ) -> Any:
        """Create a table at `path` from row data and column definitions."""
        form = encode_put_table(path, data, columns)
        return query(self.connection, Endpoint.PUT_TABLE, form)

    # analyses and jobs

    def analyze(
        self,
        app_name: str,
        params: Mapping[str, Any] | None = None,
        *,
        is_workflow: bool = False,
        wait: bool = True,
        progress: bool = False,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Any:
        """
        Run an analysis tool, or a workflow when `is_workflow` is set.

        Args:
            app_name: Tool name, or workflow path in the workspace.
            params: Parameters of the tool or workflow.
            is_workflow: Treat `app_name` as a workflow path.
            wait: Block until the job reaches a terminal state.
            progress: Report status on every poll attempt (requires wait).
            timeout: Overrides the client's poll timeout for this call.
            cancel_event: Stops polling when set.

        Returns:
            The final job-control response if waiting, otherwise the
            submission response.
        """
        if progress and not wait:
            raise InternalError("progress=True requires wait=True")
        reporter = self._reporter(progress) if wait else None
        return invocation.invoke(
            self.connection,
            app_name,
            params,
            is_workflow=is_workflow,
            wait=wait,
            progress=reporter is not None,
            reporter=reporter,
            cancel_event=cancel_event,
            **self._poll_options(timeout=timeout),
        )

    def wait_for_job(
        self,
        job_id: str,
        *,
        progress: bool = False,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Any:
        """Block until a previously submitted job reaches a terminal state."""
        return invocation.wait_for_job(
            self.connection,
            job_id,
            reporter=self._reporter(progress),
            cancel_event=cancel_event,
            **self._poll_options(timeout=timeout),
        )

    def get_job_status(self, job_id: str) -> Any:
        return invocation.get_job_status(self.connection, job_id)

    def list_applications(self) -> Any:
        return query(self.connection, Endpoint.ANALYSIS_LIST)

    def get_analysis_parameters(self, app_name: str) -> Any:
        return transfer.analysis_parameters(self.connection, app_name)

    # import / export

    def list_importers(self) -> Any:
        return query(self.connection, Endpoint.IMPORT_LIST)

    def list_exporters(self) -> Any:
        return query(self.connection, Endpoint.EXPORT_LIST)

    def get_importer_parameters(self, path: str, importer: str) -> Any:
        return transfer.importer_parameters(self.connection, path, importer)

    def get_exporter_parameters(self, path: str, exporter: str) -> Any:
        return transfer.exporter_parameters(self.connection, path, exporter)

    def export(
        self,
        path: str,
        exporter: str,
        sink: BinaryIO,
        params: Mapping[str, Any] | None = None,
    ) -> int:
        """Export `path` with `exporter` into `sink`; returns bytes written."""
        return transfer.export(self.connection, path, exporter, sink, params)

    def import_file(
        self,
        file: str | BinaryIO,
        parent_path: str,
        importer: str,
        params: Mapping[str, Any] | None = None,
        *,
        wait: bool = True,
        progress: bool = False,
        file_name: str | None = None,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Any:
        """
        Upload and import a file into `parent_path`.

        `file` is a local path or an open binary stream; for streams pass
        `file_name` to name the upload. `timeout` and `cancel_event` bound
        the polling of the import job as in `analyze`.
        """
        if progress and not wait:
            raise InternalError("progress=True requires wait=True")
        connection = self.connection
        options = self._poll_options(timeout=timeout)
        options["reporter"] = self._reporter(progress)
        options["cancel_event"] = cancel_event

        if isinstance(file, str):
            with open(file, "rb") as source:
                return transfer.import_file(
                    connection,
                    source,
                    file_name or _basename(file),
                    parent_path,
                    importer,
                    params,
                    wait=wait,
                    **options,
                )
        return transfer.import_file(
            connection,
            file,
            file_name or _basename(getattr(file, "name", "upload")),
            parent_path,
            importer,
            params,
            wait=wait,
            **options,
        )

    imPort = import_file


def _basename(path: str) -> str:
    return str(path).replace("\\", "/").rsplit("/", 1)[-1] or "upload"

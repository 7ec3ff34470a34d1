"""Import and export orchestration.

Import is a multi-step interaction: the file is uploaded under a generated
file id, an import request names the target folder, importer and
parameters, and the platform runs the import as a job that can be tracked
like any analysis. Export is a single request whose body is streamed to a
caller-provided sink unchanged.
"""

from __future__ import annotations

import uuid
from typing import Any, BinaryIO, Mapping

from gxclient.core.connection import Connection, query, to_json_param
from gxclient.core.endpoints import Endpoint, resolve
from gxclient.core.envelope import Advisory, JobHandleResult, classify
from gxclient.core.errors import InternalError
from gxclient.core.invocation import new_job_id, wait_for_job


def analysis_parameters(connection: Connection, app_name: str) -> Any:
    """Return the parameter definition of an analysis tool."""
    if not app_name:
        raise InternalError("An analysis name is required")
    return query(
        connection,
        Endpoint.ANALYSIS_PARAMS,
        {"de": f"properties/method/parameters/{app_name}"},
    )


def importer_parameters(connection: Connection, path: str, importer: str) -> Any:
    """Return the parameters an importer accepts for a target folder."""
    if not path or not importer:
        raise InternalError("Both a target path and an importer are required")
    return query(
        connection,
        Endpoint.ANALYSIS_PARAMS,
        {"de": f"properties/import/{path}", "importer": importer},
    )


def exporter_parameters(connection: Connection, path: str, exporter: str) -> Any:
    """Return the parameters an exporter accepts for a data element."""
    if not path or not exporter:
        raise InternalError("Both an element path and an exporter are required")
    return query(
        connection,
        Endpoint.ANALYSIS_PARAMS,
        {"de": f"properties/export/{path}", "exporter": exporter},
    )


def upload(connection: Connection, source: BinaryIO, file_name: str) -> tuple[str, Any]:
    """
    Upload a byte source and return (file_id, response).

    The file id names the upload in the following import request.
    """
    file_id = f"FILE{uuid.uuid4().hex[:16].upper()}"
    response = query(
        connection,
        Endpoint.UPLOAD,
        {"fileID": file_id},
        files={"file": (file_name, source)},
    )
    return file_id, response


def import_file(
    connection: Connection,
    source: BinaryIO,
    file_name: str,
    parent_path: str,
    importer: str,
    params: Mapping[str, Any] | None = None,
    *,
    wait: bool = True,
    **poll_options: Any,
) -> Any:
    """
    Upload a file and import it into a workspace folder.

    Args:
        connection: Connection used for all requests.
        source: Readable byte source of the file content.
        file_name: File name reported to the platform.
        parent_path: Folder to import into.
        importer: Importer (format) name, see listImporters.
        params: Importer parameters.
        wait: Poll the import job until it reaches a terminal state.
        **poll_options: Passed to wait_for_job.

    Returns:
        The final job-control response when waiting, otherwise the import
        response with the `jobID` the import runs under. An advisory from
        upload or import is returned as-is.
    """
    if not parent_path or not importer:
        raise InternalError("Both a parent path and an importer are required")

    file_id, uploaded = upload(connection, source, file_name)
    if isinstance(classify(uploaded), Advisory):
        return uploaded

    job_id = new_job_id("IMPORT")
    response = query(
        connection,
        Endpoint.IMPORT,
        {
            "de": parent_path,
            "fileID": file_id,
            "format": importer,
            "jobID": job_id,
            "json": to_json_param(params),
        },
    )
    envelope = classify(response)
    if isinstance(envelope, Advisory):
        return response
    if isinstance(envelope, JobHandleResult):
        job_id = envelope.job_id
    if not wait:
        return {**envelope.payload, "jobID": job_id}
    return wait_for_job(connection, job_id, **poll_options)


def export(
    connection: Connection,
    path: str,
    exporter: str,
    sink: BinaryIO,
    params: Mapping[str, Any] | None = None,
) -> int:
    """
    Export a data element and write the returned bytes to `sink`.

    Returns:
        Number of bytes written.
    """
    if not path or not exporter:
        raise InternalError("Both an element path and an exporter are required")

    form = {
        "de": path,
        "exporter": exporter,
        "type": "de",
        "parameters": to_json_param(params),
    }
    written = 0
    for chunk in connection.stream(resolve(Endpoint.EXPORT), form):
        sink.write(chunk)
        written += len(chunk)
    return written

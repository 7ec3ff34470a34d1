"""Request paths of the platform web API.

The registry is a fixed lookup table from logical operation tags to
relative request paths. Several tags share one path (folder operations are
all served by `/web/data`); they stay distinct members so callers always
name the operation they mean.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from gxclient.core.errors import InternalError


class Endpoint(str, Enum):
    """Logical operation tags understood by the client."""

    CREATE_PROJECT = "create-project"
    CREATE_FOLDER = "create-folder"
    DELETE_ELEMENT = "delete-element"
    LIST = "list"
    TABLE_COLUMNS = "table-columns"
    TABLE_DATA = "table-data"
    PUT_TABLE = "put-table"
    ANALYZE = "analyze"
    WORKFLOW = "workflow"
    JOB_CONTROL = "job-control"
    ANALYSIS_PARAMS = "analysis-params"
    ANALYSIS_LIST = "analysis-list"
    UPLOAD = "upload"
    IMPORT = "import"
    IMPORT_LIST = "import-list"
    EXPORT = "export"
    EXPORT_LIST = "export-list"


_PATHS = MappingProxyType(
    {
        Endpoint.CREATE_PROJECT: "/support/createProjectWithPermission",
        Endpoint.CREATE_FOLDER: "/web/data",
        Endpoint.DELETE_ELEMENT: "/web/data",
        Endpoint.LIST: "/web/data",
        Endpoint.TABLE_COLUMNS: "/web/table/columns",
        Endpoint.TABLE_DATA: "/web/table/rawdata",
        Endpoint.PUT_TABLE: "/web/table/createTable",
        Endpoint.ANALYZE: "/web/analysis",
        Endpoint.WORKFLOW: "/web/research",
        Endpoint.JOB_CONTROL: "/web/jobcontrol",
        Endpoint.ANALYSIS_PARAMS: "/web/bean/get",
        Endpoint.ANALYSIS_LIST: "/web/analysis/list",
        Endpoint.UPLOAD: "/web/upload",
        Endpoint.IMPORT: "/web/import",
        Endpoint.IMPORT_LIST: "/web/import/list",
        Endpoint.EXPORT: "/web/export",
        Endpoint.EXPORT_LIST: "/web/export/list",
    }
)


def resolve(tag: Endpoint) -> str:
    """
    Return the request path registered for an endpoint tag.

    Args:
        tag: Endpoint member naming the operation.

    Returns:
        The relative request path (always non-empty).

    Raises:
        InternalError: If the tag is not a registered Endpoint.
    """
    if not isinstance(tag, Endpoint):
        raise InternalError(f"Unknown endpoint tag: {tag!r}")
    try:
        return _PATHS[tag]
    except KeyError as exc:
        raise InternalError(f"No path registered for endpoint {tag.name}") from exc

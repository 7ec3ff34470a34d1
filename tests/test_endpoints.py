import pytest

from gxclient.core.endpoints import Endpoint, resolve
from gxclient.core.errors import InternalError


@pytest.mark.parametrize("tag", list(Endpoint))
def test_resolve_is_total_and_non_empty(tag: Endpoint):
    path = resolve(tag)

    assert path.startswith("/")
    assert len(path) > 1


def test_resolve_known_paths():
    assert resolve(Endpoint.ANALYZE) == "/web/analysis"
    assert resolve(Endpoint.WORKFLOW) == "/web/research"
    assert resolve(Endpoint.JOB_CONTROL) == "/web/jobcontrol"
    assert resolve(Endpoint.TABLE_DATA) == "/web/table/rawdata"
    assert resolve(Endpoint.CREATE_PROJECT) == "/support/createProjectWithPermission"


def test_shared_paths_keep_distinct_tags():
    assert resolve(Endpoint.LIST) == resolve(Endpoint.CREATE_FOLDER) == "/web/data"
    assert Endpoint.LIST is not Endpoint.CREATE_FOLDER
    assert len(set(Endpoint)) == 17


@pytest.mark.parametrize("tag", ["list", "ANALYZE", None, 3])
def test_resolve_rejects_unregistered_tags(tag):
    with pytest.raises(InternalError):
        resolve(tag)

import io
import threading

import pytest

from gxclient.core.client import GxClient
from gxclient.core.errors import InternalError, PollCancelledError, TransportError

DATA = "/web/data"
ANALYZE = "/web/analysis"
JOBS = "/web/jobcontrol"


def _client(conn, **kwargs):
    kwargs.setdefault("poll_interval", 0)
    return GxClient(conn, **kwargs)


def test_folder_operations_use_access_service(make_connection):
    conn = make_connection({DATA: [{"type": 0}]})
    client = _client(conn)

    client.create_folder("data/Projects/P", "Results")
    client.delete_element("data/Projects/P", "Old")
    client.list("data/Projects/P")

    forms = [form for _, form, _ in conn.calls]
    assert [f["command"] for f in forms] == ["25", "26", "29"]
    assert forms[0] == {
        "service": "access.service",
        "command": "25",
        "dc": "data/Projects/P",
        "de": "Results",
    }
    assert "de" not in forms[2]


def test_advisory_is_returned_not_raised(make_connection):
    advisory = {"type": 1, "message": "Folder not found"}
    conn = make_connection({DATA: [advisory]})

    assert _client(conn).list("data/missing") == advisory


def test_transport_error_propagates(make_connection):
    conn = make_connection({DATA: [TransportError("HTTP 502", status_code=502)]})

    with pytest.raises(TransportError):
        _client(conn).list("data")


def test_analyze_waits_for_completion(make_connection):
    conn = make_connection(
        {
            ANALYZE: [{"type": 0, "jobID": "J1"}],
            JOBS: [{"status": 1}, {"status": 2}, {"status": 4}],
        }
    )

    result = _client(conn).analyze("tool", {"a": 1})

    assert result == {"status": 4}
    assert conn.count(JOBS) == 3


def test_analyze_progress_requires_wait(make_connection):
    conn = make_connection({ANALYZE: [{"type": 0}]})

    with pytest.raises(InternalError):
        _client(conn).analyze("tool", wait=False, progress=True)
    assert conn.calls == []


def test_verbose_uses_configured_reporter(make_connection):
    seen = []
    conn = make_connection({ANALYZE: [{"type": 0, "jobID": "J1"}], JOBS: [{"status": 2}, {"status": 5}]})
    client = _client(conn, reporter=seen.append).set_verbose(True)

    client.analyze("tool")

    assert [p.job_id for p in seen] == ["J1", "J1"]


def test_silent_without_verbose_or_progress(make_connection):
    seen = []
    conn = make_connection({ANALYZE: [{"type": 0, "jobID": "J1"}], JOBS: [{"status": 4}]})

    _client(conn, reporter=seen.append).analyze("tool")

    assert seen == []


def test_set_connection_is_fluent_and_validated(make_connection):
    first, second = make_connection(), make_connection()
    client = _client(first)

    assert client.set_connection(second) is client
    assert client.connection is second
    with pytest.raises(InternalError):
        client.set_connection(None)


def test_connection_swap_does_not_affect_inflight_polling(make_connection):
    swapped = make_connection({JOBS: [{"status": 4}]})
    original = make_connection(
        {ANALYZE: [{"type": 0, "jobID": "J1"}], JOBS: [{"status": 2}, {"status": 4}]}
    )
    client = _client(original)

    def swap_on_first_poll(progress):
        if progress.attempt == 1:
            client.set_connection(swapped)

    client.reporter = swap_on_first_poll
    client.analyze("tool", progress=True)

    assert original.count(JOBS) == 2
    assert swapped.calls == []


def test_concurrent_invocations_are_independent(make_connection):
    results = {}

    def run(name):
        conn = make_connection(
            {ANALYZE: [{"type": 0, "jobID": name}], JOBS: [{"status": 2}, {"status": 4, "job": name}]}
        )
        results[name] = _client(conn).analyze(name)

    threads = [threading.Thread(target=run, args=(n,)) for n in ("A", "B", "C")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == {n: {"status": 4, "job": n} for n in ("A", "B", "C")}


def test_put_table_and_read_table(make_connection):
    from gxclient.core.tables import ColumnDef, ColumnType

    conn = make_connection(
        {
            "/web/table/createTable": [{"type": 0}],
            "/web/table/columns": [{"type": 0, "values": [{"name": "n", "type": "Integer"}]}],
            "/web/table/rawdata": [{"type": 0, "values": [[1, 2]]}],
        }
    )
    client = _client(conn)

    assert client.put_table("data/t", [(1,), (2,)], [ColumnDef("n", ColumnType.INTEGER)]) == {"type": 0}
    table = client.read_table("data/t")

    assert table.rows == ((1,), (2,))
    assert table.columns[0].type is ColumnType.INTEGER


def test_import_file_from_path(make_connection, tmp_path):
    source = tmp_path / "genes.txt"
    source.write_bytes(b"TP53\n")
    conn = make_connection(
        {"/web/upload": [{"type": 0}], "/web/import": [{"type": 0, "jobID": "I1"}], JOBS: [{"status": 4}]}
    )

    result = _client(conn).imPort(str(source), "data/f", "Generic", {})

    assert result == {"status": 4}
    _, _, files = conn.calls[0]
    assert files["file"][0] == "genes.txt"


def test_import_file_can_be_cancelled_while_polling(make_connection):
    conn = make_connection(
        {"/web/upload": [{"type": 0}], "/web/import": [{"type": 0, "jobID": "I1"}], JOBS: [{"status": 2}]}
    )
    client = _client(conn)
    cancel = threading.Event()

    def cancel_on_first_poll(progress):
        if progress.attempt == 1:
            cancel.set()

    client.reporter = cancel_on_first_poll
    with pytest.raises(PollCancelledError) as excinfo:
        client.import_file(io.BytesIO(b"x"), "data/f", "Generic", progress=True, cancel_event=cancel)

    assert excinfo.value.job_id == "I1"
    assert conn.count(JOBS) == 1


def test_import_file_no_wait_keeps_job_id(make_connection):
    conn = make_connection({"/web/upload": [{"type": 0}], "/web/import": [{"type": 0}]})

    result = _client(conn).import_file(io.BytesIO(b"x"), "data/f", "Generic", wait=False, file_name="x.txt")

    assert result["jobID"] == conn.calls[1][1]["jobID"]


def test_export_delegates_to_stream(make_connection):
    conn = make_connection(chunks=[b"a", b"b"])
    sink = io.BytesIO()

    assert _client(conn).export("data/t", "CSV", sink) == 2
    assert sink.getvalue() == b"ab"


def test_listing_operations_hit_registry_paths(make_connection):
    conn = make_connection(
        {
            "/web/analysis/list": [{"values": []}],
            "/web/import/list": [{"values": []}],
            "/web/export/list": [{"values": []}],
            "/support/createProjectWithPermission": [{"type": 0}],
        }
    )
    client = _client(conn)

    client.list_applications()
    client.list_importers()
    client.list_exporters()
    client.create_project({"project": "Demo"})

    assert conn.paths() == [
        "/web/analysis/list",
        "/web/import/list",
        "/web/export/list",
        "/support/createProjectWithPermission",
    ]
    assert conn.calls[-1][1] == {"project": "Demo"}

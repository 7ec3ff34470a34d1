import pytest

from gxclient.core.envelope import (
    Advisory,
    DataResult,
    JobHandleResult,
    classify,
    decode_json,
    extract_percent,
    extract_status,
)
from gxclient.core.errors import TransportError
from gxclient.core.jobs import JobStatus


def test_job_id_without_payload_is_job_handle():
    envelope = classify({"type": 0, "jobID": "JOB42"}, payload_keys=("values",))

    assert isinstance(envelope, JobHandleResult)
    assert envelope.job_id == "JOB42"


def test_payload_wins_over_job_id_and_error():
    response = {"values": [1, 2], "jobID": "JOB1", "type": 1, "message": "odd"}

    envelope = classify(response, payload_keys=("values",))

    assert isinstance(envelope, DataResult)
    assert envelope.payload is response


def test_error_only_response_is_returned_unchanged():
    response = {"type": 1, "message": "Access denied"}

    envelope = classify(response, payload_keys=("values",))

    assert isinstance(envelope, Advisory)
    assert envelope.payload is response
    assert envelope.message == "Access denied"


@pytest.mark.parametrize(
    "response",
    [
        {"error": "Element not found"},
        {"errorMessage": "Invalid parameter"},
        {"message": "Session expired"},
        {"type": 3},
    ],
)
def test_advisory_indicators(response):
    assert isinstance(classify(response), Advisory)


@pytest.mark.parametrize("response", [None, [], "oops", 42])
def test_non_mapping_responses_do_not_raise(response):
    envelope = classify(response, payload_keys=("values",))

    assert isinstance(envelope, Advisory)
    assert envelope.payload == response


def test_plain_ok_response_is_data():
    assert isinstance(classify({"type": 0}), DataResult)


def test_blank_job_id_is_ignored():
    assert isinstance(classify({"type": 0, "jobID": "  "}), DataResult)


def test_extract_status_tolerates_shapes():
    assert extract_status({"status": 4}) == (JobStatus.COMPLETED, 4)
    assert extract_status({"status": "2"}) == (JobStatus.RUNNING, "2")
    assert extract_status({"status": 99}) == (None, 99)
    assert extract_status({}) == (None, None)
    assert extract_status("nope") == (None, None)


def test_extract_percent():
    assert extract_percent({"percent": 40}) == 40
    assert extract_percent({"percent": "75"}) == 75
    assert extract_percent({"percent": True}) is None
    assert extract_percent({}) is None


def test_decode_json_rejects_garbage():
    assert decode_json(b"") == {}
    assert decode_json(b'{"a": 1}') == {"a": 1}
    with pytest.raises(TransportError):
        decode_json(b"<html>502</html>")

"""Tests for running predictions and waiting on them."""
import pytest

from conftest import make_response
from replicate_client.types import Prediction, RunOptions, RunResult, WaitOptions
from replicate_client.utils.exceptions import (
    NotFoundError,
    PredictionCanceledError,
    PredictionFailedError,
    ValidationError,
)


def prediction(status, output=None, error=None, prediction_id="p1"):
    return make_response(
        payload={"id": prediction_id, "status": status, "output": output, "error": error}
    )


def model_lookup(version_id="latest123"):
    return make_response(
        payload={"owner": "acme", "name": "sdxl", "latest_version": {"id": version_id}}
    )


def requested_paths(session):
    return [(c["method"], c["url"].rsplit("/v1/", 1)[1]) for c in session.calls]


def test_versioned_identifier_skips_lookup(client, session, sleeps):
    session.queue(prediction("succeeded", output=["img.png"]))

    result = client.run("acme/sdxl:v42", {"input": {"prompt": "a cat"}})

    assert result == RunResult(output=["img.png"], id="p1")
    assert requested_paths(session) == [("POST", "predictions")]
    assert session.calls[0]["json"] == {"version": "v42", "input": {"prompt": "a cat"}}
    assert sleeps == []


def test_unversioned_identifier_looks_up_latest_once(client, session, sleeps):
    session.queue(model_lookup("latest123"), prediction("succeeded", output="done"))

    result = client.run("acme/sdxl", {"input": {}})

    assert result.output == "done"
    assert requested_paths(session) == [
        ("GET", "models/acme/sdxl"),
        ("POST", "predictions"),
    ]
    assert session.calls[1]["json"]["version"] == "latest123"


def test_lookup_of_missing_model_fails_before_submission(client, session, sleeps):
    session.queue(make_response(404, {"detail": "Not found."}))

    with pytest.raises(NotFoundError) as exc_info:
        client.run("acme/missing", {"input": {}})

    assert exc_info.value.path == "models/acme/missing"
    assert len(session.calls) == 1


def test_model_without_versions_fails(client, session, sleeps):
    session.queue(make_response(payload={"owner": "acme", "name": "empty", "latest_version": None}))

    with pytest.raises(NotFoundError):
        client.run("acme/empty", {"input": {}})


def test_polls_until_succeeded_and_reports_progress(client, session, sleeps):
    session.queue(
        prediction("starting"),
        prediction("processing"),
        prediction("succeeded", output={"text": "hello"}),
    )
    seen = []

    result = client.run("acme/llm:v1", {"input": {"prompt": "hi"}}, progress=seen.append)

    assert result.to_dict() == {"output": {"text": "hello"}, "id": "p1"}
    assert requested_paths(session) == [
        ("POST", "predictions"),
        ("GET", "predictions/p1"),
        ("GET", "predictions/p1"),
    ]
    assert [p.status for p in seen] == ["processing", "succeeded"]
    assert all(isinstance(p, Prediction) for p in seen)
    assert sleeps == [1.0, 1.0]


def test_failed_prediction_raises_with_remote_message(client, session, sleeps):
    session.queue(prediction("processing"), prediction("failed", error="boom"))

    with pytest.raises(PredictionFailedError) as exc_info:
        client.run("acme/llm:v1", {"input": {}})

    assert str(exc_info.value) == "Prediction failed: boom"
    assert exc_info.value.prediction.status == "failed"


def test_failed_prediction_without_message(client, session, sleeps):
    session.queue(prediction("failed"))

    with pytest.raises(PredictionFailedError, match="Prediction failed: Unknown error"):
        client.run("acme/llm:v1", {"input": {}})


def test_canceled_prediction_stops_polling(client, session, sleeps):
    session.queue(prediction("starting"), prediction("canceled"))

    with pytest.raises(PredictionCanceledError):
        client.run("acme/llm:v1", {"input": {}})

    assert len(session.calls) == 2
    assert session.responses == []


def test_failed_and_canceled_are_distinct():
    assert not issubclass(PredictionCanceledError, PredictionFailedError)
    assert not issubclass(PredictionFailedError, PredictionCanceledError)


def test_interval_override_used_for_every_sleep(client, session, sleeps):
    session.queue(
        prediction("starting"),
        prediction("processing"),
        prediction("processing"),
        prediction("succeeded"),
    )

    client.run("acme/llm:v1", {"input": {}, "wait": {"interval": 0.1}})

    assert sleeps == [0.1, 0.1, 0.1]


def test_prefer_wait_header_only_for_boolean_true(client, session, sleeps):
    session.queue(prediction("succeeded"), prediction("succeeded"))

    client.run("acme/llm:v1", {"input": {}, "wait": True})
    client.run("acme/llm:v1", {"input": {}, "wait": {"interval": 0.5}})

    assert session.calls[0]["headers"]["Prefer"] == "wait"
    assert "Prefer" not in session.calls[1]["headers"]


def test_webhook_fields_are_forwarded(client, session, sleeps):
    session.queue(prediction("succeeded"))
    options = RunOptions(
        input={"prompt": "x"},
        webhook="https://example.com/hook",
        webhook_events_filter=["completed"],
    )

    client.run("acme/llm:v1", options)

    assert session.calls[0]["json"] == {
        "version": "v1",
        "input": {"prompt": "x"},
        "webhook": "https://example.com/hook",
        "webhook_events_filter": ["completed"],
    }


def test_unknown_status_keeps_polling(client, session, sleeps):
    session.queue(prediction("queued"), prediction("booting"), prediction("succeeded", output=1))

    assert client.run("acme/llm:v1", {"input": {}}).output == 1
    assert len(sleeps) == 2


def test_invalid_identifier_is_rejected_without_requests(client, session, sleeps):
    with pytest.raises(ValidationError):
        client.run("just-a-name", {"input": {}})

    assert session.calls == []


def test_wait_returns_failed_prediction_without_raising(client, session, sleeps):
    session.queue(prediction("failed", error="boom"))

    result = client.wait({"id": "p1", "status": "processing"})

    assert result.status == "failed"
    assert result.error == "boom"
    assert requested_paths(session) == [("GET", "predictions/p1")]
    assert sleeps == [1.0]


def test_wait_returns_canceled_prediction(client, session, sleeps):
    session.queue(prediction("processing"), prediction("canceled"))

    result = client.wait(Prediction(id="p1", status="starting"), WaitOptions(interval=0.25))

    assert result.status == "canceled"
    assert sleeps == [0.25, 0.25]


def test_wait_on_terminal_prediction_does_not_poll(client, session, sleeps):
    result = client.wait({"id": "p1", "status": "succeeded", "output": "x"})

    assert result.output == "x"
    assert session.calls == []


def test_wait_accepts_interval_mapping_and_progress(client, session, sleeps):
    session.queue(prediction("processing"), prediction("succeeded"))
    seen = []

    client.wait({"id": "p1", "status": "starting"}, {"interval": 2}, progress=seen.append)

    assert sleeps == [2.0, 2.0]
    assert [p.status for p in seen] == ["processing", "succeeded"]


def test_wait_rejects_negative_interval(client, session, sleeps):
    with pytest.raises(ValidationError):
        client.wait({"id": "p1", "status": "starting"}, WaitOptions(interval=-1))


def test_wait_returns_unrecognized_status_without_polling_again(client, session, sleeps):
    session.queue(prediction("queued"), prediction("succeeded"))

    result = client.wait({"id": "p1", "status": "processing"})

    assert result.status == "queued"
    assert len(session.calls) == 1
    assert sleeps == [1.0]


def test_wait_does_not_poll_unrecognized_initial_status(client, session, sleeps):
    result = client.wait({"id": "p1", "status": "queued"})

    assert result.status == "queued"
    assert session.calls == []


def test_run_rejects_negative_interval_before_submitting(client, session, sleeps):
    with pytest.raises(ValidationError):
        client.run("acme/llm:v1", {"input": {}, "wait": {"interval": -1}})

    assert session.calls == []
    assert sleeps == []

"""Tests for the generic request primitives."""
import pytest
import requests

from conftest import make_response
from replicate_client import __version__
from replicate_client.utils.exceptions import DecodeError, NotFoundError, RequestError


def test_get_builds_url_and_headers(client, session):
    session.queue(make_response(payload={"ok": True}))

    result = client.get("predictions", {"cursor": "abc"})

    assert result == {"ok": True}
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.example.com/v1/predictions"
    assert call["params"] == {"cursor": "abc"}
    assert call["headers"]["Authorization"] == "Bearer r8_test_token"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["headers"]["User-Agent"] == f"replicate-client/{__version__}"
    assert call["timeout"] == 30


def test_base_url_without_trailing_slash(session):
    from replicate_client.client import ReplicateClient

    client = ReplicateClient("tok", base_url="https://api.example.com/v1", session=session)
    session.queue(make_response(payload={}))

    client.get("/account")

    assert session.calls[0]["url"] == "https://api.example.com/v1/account"


def test_post_sends_json_and_extra_headers(client, session):
    session.queue(make_response(201, {"id": "p1"}))

    result = client.post("predictions", {"version": "v1"}, headers={"Prefer": "wait"})

    assert result == {"id": "p1"}
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == {"version": "v1"}
    assert call["headers"]["Prefer"] == "wait"
    assert call["headers"]["Authorization"] == "Bearer r8_test_token"


def test_post_raw_body_overrides_content_type(client, session):
    session.queue(make_response(payload={"results": []}))

    client.post("models", headers={"Content-Type": "text/plain"}, body="flux")

    call = session.calls[0]
    assert call["data"] == b"flux"
    assert "json" not in call
    assert call["headers"]["Content-Type"] == "text/plain"


def test_patch_sends_json(client, session):
    session.queue(make_response(payload={"name": "d"}))

    client.patch("deployments/me/d", {"max_instances": 3})

    assert session.calls[0]["method"] == "PATCH"
    assert session.calls[0]["json"] == {"max_instances": 3}


def test_delete_ignores_empty_body(client, session):
    session.queue(make_response(204, text=""))

    assert client.delete("deployments/me/d") is None
    assert session.calls[0]["method"] == "DELETE"


@pytest.mark.parametrize("method", ["get", "post", "patch", "delete"])
def test_not_found_names_path(client, session, method):
    session.queue(make_response(404, {"detail": "Not found."}))

    with pytest.raises(NotFoundError) as exc_info:
        getattr(client, method)("models/nobody/nothing")

    assert exc_info.value.path == "models/nobody/nothing"
    assert exc_info.value.status_code == 404
    assert "Endpoint not found: models/nobody/nothing" in str(exc_info.value)


def test_server_error_wraps_cause(client, session):
    session.queue(make_response(500, {"detail": "boom"}))

    with pytest.raises(RequestError) as exc_info:
        client.get("account")

    assert not isinstance(exc_info.value, NotFoundError)
    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, requests.HTTPError)
    assert str(exc_info.value).startswith("An error occurred while making the request")


def test_transport_failure_wraps_cause(client, session):
    session.queue(requests.ConnectionError("connection refused"))

    with pytest.raises(RequestError) as exc_info:
        client.get("account")

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, requests.ConnectionError)


def test_invalid_json_raises_decode_error(client, session):
    session.queue(make_response(200, text="<html>oops</html>"))

    with pytest.raises(DecodeError):
        client.get("account")


def test_custom_auth_handler(session):
    from replicate_client.auth import AuthHandler
    from replicate_client.client import ReplicateClient

    class HeaderAuth(AuthHandler):
        def get_headers(self):
            return {"X-Api-Key": "secret"}

    client = ReplicateClient(auth_handler=HeaderAuth(), session=session)
    session.queue(make_response(payload={}))

    client.get("account")

    headers = session.calls[0]["headers"]
    assert headers["X-Api-Key"] == "secret"
    assert "Authorization" not in headers


@pytest.mark.parametrize("body", ["null", "[1, 2]", '"text"', "42"])
def test_non_object_json_raises_decode_error(client, session, body):
    session.queue(make_response(200, text=body))

    with pytest.raises(DecodeError, match="Expected a JSON object"):
        client.get("predictions/p1")


def test_non_object_prediction_surfaces_decode_error(client, session):
    session.queue(make_response(200, text="null"))

    with pytest.raises(DecodeError):
        client.get_prediction("p1")

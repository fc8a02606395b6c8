import pytest
import requests

from mocks.fake_transports import FakeSession, make_response
from opsdesk.errors import TransportError
from opsdesk.integrations.app_api import AppApiClient, parse_body


def test_json_body_is_returned():
    session = FakeSession([make_response(200, {"success": True, "data": {"totalPrice": 90}})])
    client = AppApiClient("http://localhost:3000/", session=session)

    response = client.post("/api/admin/quotes/calculate-events-price", {"eventIds": ["a"], "numberOfPeople": 2})

    assert response.ok
    assert response.body["data"]["totalPrice"] == 90
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://localhost:3000/api/admin/quotes/calculate-events-price"
    assert call["json"] == {"eventIds": ["a"], "numberOfPeople": 2}
    assert call["timeout"] == 30


def test_non_json_body_becomes_generic_error():
    html = "<!DOCTYPE html><html><body>Internal Server Error</body></html>"
    body = parse_body(make_response(500, html))
    assert body == {
        "success": False,
        "error": {"code": "UNPARSEABLE_RESPONSE", "message": "Unknown error", "status": 500},
    }


def test_empty_body_becomes_generic_error():
    body = parse_body(make_response(204, b""))
    assert body["error"]["message"] == "Empty response body"


def test_error_message_from_api_error_shape():
    session = FakeSession([make_response(400, {"success": False, "error": {"code": "VALIDATION_ERROR", "message": "eventIds required"}})])
    response = AppApiClient("http://x", session=session).get("/api/admin/quotes/1")
    assert not response.ok
    assert response.error_message == "eventIds required"


def test_token_sets_bearer_header():
    session = FakeSession()
    AppApiClient("http://x", token="t0k", session=session)
    assert session.headers["Authorization"] == "Bearer t0k"


def test_connection_error_is_a_transport_error():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(TransportError) as exc:
        AppApiClient("http://x", session=session).get("/api")
    assert exc.value.code == "ConnectionError"

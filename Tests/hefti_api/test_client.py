# /tests/hefti_api/test_client.py
#
# Imports
import json
import pytest
#
# 3rd-party Libraries
import httpx
#
# Local Imports
from hefti_tui.hefti_api.client import HeftiAPIClient
from hefti_tui.hefti_api.exceptions import (
    APIConnectionError, APIRequestError, APIResponseError, APITimeoutError, AuthenticationError,
)
from hefti_tui.hefti_api.schemas import EntryForm
#
#######################################################################################################################
#
# Fixtures:

pytestmark = pytest.mark.asyncio

BASE_URL = "http://hefti.test/api"


class RecordingHandler:
    """MockTransport handler that records requests and answers from a queue."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_client(handler, token=None) -> HeftiAPIClient:
    return HeftiAPIClient(BASE_URL, token=token, timeout=5.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def form():
    return EntryForm(title="Standup", logdate="2024-03-01", entry_type="Schulung", spend_time=1.5)


# --- Happy paths ---

async def test_create_entry_posts_form_and_returns_identifier(form):
    handler = RecordingHandler(httpx.Response(200, json=42))
    client = make_client(handler)

    new_id = await client.create_entry(form)

    assert new_id == "42"
    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/entry"
    assert json.loads(request.content) == {
        "title": "Standup",
        "logdate": "2024-03-01",
        "entry_type": "Schulung",
        "spend_time": 1.5,
    }
    await client.close()


async def test_create_entry_accepts_string_identifier(form):
    client = make_client(RecordingHandler(httpx.Response(201, json="a1b2")))
    assert await client.create_entry(form) == "a1b2"
    await client.close()


@pytest.mark.parametrize("body", [{"ok": True}, "", "   ", None])
async def test_create_entry_without_identifier_is_a_response_error(form, body):
    client = make_client(RecordingHandler(httpx.Response(200, json=body)))
    with pytest.raises(APIResponseError):
        await client.create_entry(form)
    await client.close()


async def test_update_entry_puts_to_entry_path(form):
    handler = RecordingHandler(httpx.Response(200))
    client = make_client(handler)

    assert await client.update_entry("7", form) is None

    request = handler.requests[0]
    assert request.method == "PUT"
    assert request.url.path == "/api/entry/7"
    assert json.loads(request.content)["spend_time"] == 1.5
    await client.close()


async def test_delete_entry_sends_delete_without_body():
    handler = RecordingHandler(httpx.Response(204))
    client = make_client(handler)

    await client.delete_entry("9")

    request = handler.requests[0]
    assert request.method == "DELETE"
    assert request.url.path == "/api/entry/9"
    assert request.content == b""
    await client.close()


async def test_list_entries_parses_records():
    payload = [
        {"id": 1, "title": "Standup", "description": None, "spend_time": 0.5,
         "logdate": "2024-03-01", "entry_type": "Betriebliche Tätigkeit"},
        {"id": "2", "title": "Kurs", "spend_time": 3, "logdate": "2024-03-02", "entry_type": "Schulung"},
    ]
    client = make_client(RecordingHandler(httpx.Response(200, json=payload)))

    records = await client.list_entries()

    assert [r.identifier for r in records] == ["1", "2"]
    assert records[1].spend_time == 3.0
    assert records[0].logdate.isoformat() == "2024-03-01"
    await client.close()


async def test_login_stores_token_and_sends_bearer_header(form):
    handler = RecordingHandler(
        httpx.Response(200, json={"user": {"username": "azubi", "token": "tok-123", "image": None}}),
        httpx.Response(200, json=5),
    )
    client = make_client(handler)

    login = await client.login("azubi", "geheim")
    await client.create_entry(form)

    assert login.user.username == "azubi"
    assert client.token == "tok-123"
    login_request, create_request = handler.requests
    assert login_request.url.path == "/api/auth/login"
    assert json.loads(login_request.content) == {"username": "azubi", "password": "geheim"}
    assert "Authorization" not in login_request.headers
    assert create_request.headers["Authorization"] == "Bearer tok-123"
    await client.close()


async def test_configured_token_is_sent_from_the_start():
    handler = RecordingHandler(httpx.Response(200, json=[]))
    client = make_client(handler, token="abc")
    await client.list_entries()
    assert handler.requests[0].headers["Authorization"] == "Bearer abc"
    await client.close()


# --- Error mapping ---

@pytest.mark.parametrize("response, expected", [
    (httpx.Response(401, json={"detail": "bad token"}), AuthenticationError),
    (httpx.Response(422, json={"detail": [{"loc": ["body", "spend_time"]}]}), APIRequestError),
    (httpx.Response(500, text="boom"), APIResponseError),
    (httpx.Response(404, json={"detail": "Entry not found"}), APIResponseError),
])
async def test_error_statuses_map_to_api_errors(form, response, expected):
    client = make_client(RecordingHandler(response))
    with pytest.raises(expected):
        await client.update_entry("1", form)
    await client.close()


async def test_response_error_keeps_status_and_detail(form):
    client = make_client(RecordingHandler(httpx.Response(404, json={"detail": "Entry not found"})))
    with pytest.raises(APIResponseError) as exc_info:
        await client.delete_entry("1")
    assert exc_info.value.status_code == 404
    assert "Entry not found" in str(exc_info.value)
    assert exc_info.value.response_data == {"detail": "Entry not found"}
    await client.close()


async def test_connect_error_maps_to_connection_error(form):
    client = make_client(RecordingHandler(httpx.ConnectError("connection refused")))
    with pytest.raises(APIConnectionError) as exc_info:
        await client.create_entry(form)
    assert not isinstance(exc_info.value, APITimeoutError)
    await client.close()


async def test_read_timeout_maps_to_timeout_error(form):
    client = make_client(RecordingHandler(httpx.ReadTimeout("too slow")))
    with pytest.raises(APITimeoutError):
        await client.create_entry(form)
    await client.close()


async def test_invalid_json_maps_to_response_error(form):
    client = make_client(RecordingHandler(httpx.Response(200, content=b"<html>", headers={"Content-Type": "text/html"})))
    with pytest.raises(APIResponseError) as exc_info:
        await client.create_entry(form)
    assert exc_info.value.response_data == {"raw_text": "<html>"}
    await client.close()

#
# End of test_client.py
#######################################################################################################################

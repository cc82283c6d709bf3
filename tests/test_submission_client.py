import json

import httpx
import pytest

from wizard.client import UNKNOWN_ERROR, SubmissionClient

URL = "http://leads.test/api/submit-form"

PAYLOAD = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phoneNumber": "(416) 555-0123",
    "userType": "rent",
    "budget": "$1000-$1500",
}


def _client(handler, seen=None):
    def _record(request):
        if seen is not None:
            seen.append(request)
        return handler(request)
    return SubmissionClient(URL, transport=httpx.MockTransport(_record))


@pytest.mark.asyncio
async def test_submit_success():
    seen = []
    client = _client(
        lambda request: httpx.Response(200, json={"success": True, "data": {"spreadsheetId": "abc"}}),
        seen,
    )

    result = await client.submit(PAYLOAD)

    assert result.success is True
    assert result.data == {"spreadsheetId": "abc"}
    assert result.status_code == 200

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["content-type"] == "application/json"
    body = json.loads(request.content)
    assert list(body) == list(PAYLOAD)
    assert body == PAYLOAD


@pytest.mark.asyncio
async def test_submit_server_error_uses_error_field():
    client = _client(
        lambda request: httpx.Response(
            500,
            json={"success": False, "error": "Internal Server Error", "message": "Failed to append row to Google Sheet"},
        )
    )

    result = await client.submit(PAYLOAD)

    assert result.success is False
    assert result.message == "Internal Server Error"
    assert result.status_code == 500


@pytest.mark.asyncio
async def test_submit_ok_status_without_success_flag():
    client = _client(lambda request: httpx.Response(200, json={"data": {}}))
    result = await client.submit(PAYLOAD)
    assert result.success is False
    assert result.message == UNKNOWN_ERROR


@pytest.mark.asyncio
async def test_submit_non_json_body():
    client = _client(lambda request: httpx.Response(502, text="<html>Bad Gateway</html>"))
    result = await client.submit(PAYLOAD)
    assert result.success is False
    assert result.message == UNKNOWN_ERROR
    assert result.status_code == 502


@pytest.mark.asyncio
async def test_submit_network_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = await _client(refuse).submit(PAYLOAD)

    assert result.success is False
    assert result.message == "connection refused"
    assert result.status_code is None


def test_default_timeout_waits_indefinitely():
    assert SubmissionClient(URL).timeout is None

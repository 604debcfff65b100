"""
Tests for the OneTap HTTP client.
"""

import httpx
import pytest

from onetap.client import OneTapAPIError, OneTapClient
from onetap.credentials import OneTapCredential

from conftest import API_KEY

BASE_URL = "https://api.test"


def make_client(onetap_api, **kwargs):
    credential = OneTapCredential(apiKey=API_KEY)
    return OneTapClient(credential, BASE_URL, http_client=onetap_api.client(), **kwargs)


@pytest.mark.asyncio
async def test_sends_auth_headers(onetap_api):
    onetap_api.add("GET", "/api/lists", {"data": []})
    client = make_client(onetap_api)

    await client.get("/api/lists")

    request = onetap_api.requests[0]
    assert str(request.url) == f"{BASE_URL}/api/lists"
    assert request.headers["X-API-Key"] == API_KEY
    assert request.headers["x-sourceapp"] == "n8n-integration"
    assert request.headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_drops_none_query_values(onetap_api):
    onetap_api.add("GET", "/api/participants", [])
    client = make_client(onetap_api)

    await client.get("/api/participants", {"listId": "L1", "profileId": None, "checkedIn": True})

    assert onetap_api.params() == {"listId": "L1", "checkedIn": "true"}


@pytest.mark.asyncio
async def test_json_body(onetap_api):
    onetap_api.add("POST", "/api/profiles", {"data": {"id": "P1"}})
    client = make_client(onetap_api)

    response = await client.post("/api/profiles", {"name": "Ada"})

    assert response == {"data": {"id": "P1"}}
    assert onetap_api.body() == {"name": "Ada"}


@pytest.mark.asyncio
async def test_empty_and_non_json_bodies(onetap_api):
    onetap_api.add("DELETE", "/api/lists/L1", httpx.Response(204))
    onetap_api.add("GET", "/api/ping", httpx.Response(200, text="pong"))
    client = make_client(onetap_api)

    assert await client.delete("/api/lists/L1") == {}
    assert await client.get("/api/ping") == {"text": "pong"}


@pytest.mark.asyncio
async def test_error_status_uses_api_message(onetap_api):
    onetap_api.add("GET", "/api/profiles/nope", httpx.Response(404, json={"message": "Profile not found"}))
    client = make_client(onetap_api)

    with pytest.raises(OneTapAPIError, match="Profile not found") as exc_info:
        await client.get("/api/profiles/nope")

    assert exc_info.value.status_code == 404
    assert exc_info.value.payload == {"message": "Profile not found"}


@pytest.mark.asyncio
async def test_transport_failures(onetap_api):
    onetap_api.add("GET", "/api/slow", httpx.ReadTimeout("slow"))
    onetap_api.add("GET", "/api/down", httpx.ConnectError("refused"))
    client = make_client(onetap_api, timeout=5)

    with pytest.raises(OneTapAPIError, match="timed out after 5 seconds"):
        await client.get("/api/slow")
    with pytest.raises(OneTapAPIError, match="Request to OneTap failed"):
        await client.get("/api/down")


@pytest.mark.asyncio
async def test_attempts_each_request_once(onetap_api):
    onetap_api.add("GET", "/api/lists", httpx.Response(500, json={"error": "boom"}))
    client = make_client(onetap_api)

    with pytest.raises(OneTapAPIError, match="boom"):
        await client.get("/api/lists")

    assert len(onetap_api.requests) == 1


@pytest.mark.asyncio
async def test_leaves_host_client_open(onetap_api):
    http_client = onetap_api.client()
    onetap_api.add("GET", "/api/lists", {"data": []})

    async with OneTapClient(OneTapCredential(apiKey=API_KEY), BASE_URL, http_client=http_client) as client:
        await client.get("/api/lists")

    assert not http_client.is_closed

"""
Tests for the OneTap Trigger node.
"""

import importlib.util
from pathlib import Path

import httpx
import pytest

_spec = importlib.util.spec_from_file_location(
    "onetap_trigger_execute", Path(__file__).parent.parent / "backend" / "execute.py"
)
node = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(node)

NOW = 1_700_000_000


@pytest.mark.asyncio
async def test_poll_check_ins(make_context, onetap_api):
    onetap_api.add("GET", "/api/participants", [
        {"id": "PA1", "checkInMethod": "QR"},
        {"id": "PA2", "checkInMethod": "TAP"},
    ])
    context = make_context(
        {"triggerOn": "checkin", "pollInterval": 10, "listId": "L1", "additionalFilters": {"method": ["QR"]}},
        clock=lambda: NOW,
    )

    items = await node.poll(context)

    assert [i.json_data for i in items] == [{
        "id": "PA1",
        "checkInMethod": "QR",
        "triggerType": "checkin",
        "environment": "production",
        "triggeredAt": NOW,
    }]
    params = onetap_api.params()
    assert params["gtCheckInDate"] == str(NOW - 600)
    assert params["checkedIn"] == "true"
    assert params["listId"] == "L1"


@pytest.mark.asyncio
async def test_poll_error_yields_no_events(make_context, onetap_api):
    onetap_api.add("GET", "/api/participants", httpx.ConnectError("refused"))
    context = make_context({"triggerOn": "participant"}, clock=lambda: NOW)

    assert await node.poll(context) == []


@pytest.mark.asyncio
async def test_poll_server_error_yields_no_events(make_context, onetap_api):
    onetap_api.add("GET", "/api/profiles", httpx.Response(500, json={"error": "boom"}))
    context = make_context({"triggerOn": "profile"}, clock=lambda: NOW)

    assert await node.poll(context) == []


@pytest.mark.asyncio
async def test_poll_without_credential_yields_no_events(make_context, onetap_api):
    context = make_context({"triggerOn": "checkin"}, credentials={})

    assert await node.poll(context) == []
    assert onetap_api.requests == []


@pytest.mark.asyncio
async def test_webhook_forwards_matching_payload(make_context):
    context = make_context(
        {"triggerOn": "checkout", "triggerMethod": "webhook", "profileId": "P1"},
        webhook_request={"body": {"profileId": "P1", "checkOutMethod": "TAP"}, "headers": {"h": "1"}, "query": {}},
        clock=lambda: NOW,
    )

    items = await node.webhook(context)

    assert len(items) == 1
    assert items[0].json_data["triggerType"] == "checkout"
    assert items[0].json_data["headers"] == {"h": "1"}
    assert items[0].json_data["triggeredAt"] == NOW


@pytest.mark.asyncio
async def test_webhook_drops_other_list(make_context):
    context = make_context(
        {"triggerOn": "checkin", "listId": "L1"},
        webhook_request={"body": {"listId": "L2"}},
    )

    assert await node.webhook(context) == []


@pytest.mark.asyncio
async def test_execute_follows_trigger_method(make_context, onetap_api):
    onetap_api.add("GET", "/api/profiles", {"data": [{"id": "P1"}]})
    polling = make_context({"triggerOn": "profile"}, clock=lambda: NOW)
    webhook = make_context(
        {"triggerOn": "profile", "triggerMethod": "webhook"},
        webhook_request={"body": {"id": "P2"}},
    )

    assert [i.json_data["id"] for i in await node.execute(polling)] == ["P1"]
    assert [i.json_data["id"] for i in await node.execute(webhook)] == ["P2"]

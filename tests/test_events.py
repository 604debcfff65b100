"""
Tests for trigger polling queries and event filters.
"""

import pytest

from onetap.client import OneTapAPIError, OneTapClient
from onetap.credentials import OneTapCredential
from onetap.events import (
    TriggerConfig,
    build_poll_request,
    created_after,
    filter_polled,
    lookback_since,
    poll_events,
    webhook_event,
)

NOW = 1_700_000_000


@pytest.fixture
def client(onetap_api):
    return OneTapClient(OneTapCredential(apiKey="k"), "https://api.test", http_client=onetap_api.client())


def test_lookback():
    assert lookback_since(NOW, 5) == NOW - 300


class TestPollRequest:
    def test_checkin(self):
        config = TriggerConfig(triggerOn="checkin", listId="L1")
        path, query = build_poll_request(config, NOW - 300)
        assert path == "/api/participants"
        assert query == {
            "limit": 100, "skip": 0, "sortField": "checkInDate", "sortOrder": "desc",
            "gtCheckInDate": NOW - 300, "checkedIn": True, "listId": "L1",
        }

    def test_checkout(self):
        path, query = build_poll_request(TriggerConfig(triggerOn="checkout", profileId="P1"), 10)
        assert query["sortField"] == "checkOutDate"
        assert query["gtCheckOutDate"] == 10
        assert query["checkedOut"] is True
        assert query["profileId"] == "P1"

    def test_participant_ignores_profile_filter(self):
        path, query = build_poll_request(TriggerConfig(triggerOn="participant", profileId="P1"), 10)
        assert query == {"limit": 100, "skip": 0, "sortField": "createdAt", "sortOrder": "desc"}

    def test_profile(self):
        path, query = build_poll_request(TriggerConfig(triggerOn="profile"), 10)
        assert path == "/api/profiles"
        assert query == {"page": 0, "pageSize": 100, "sortBy": "createdAt", "sortOrder": "desc"}


def test_created_after():
    since = 1704067200
    assert created_after({"createdAt": since + 1}, since)
    assert not created_after({"createdAt": since}, since)
    assert created_after({"createdAt": "2024-01-01T00:00:01Z"}, since)
    assert created_after({}, since)
    assert not created_after({"createdAt": "garbage"}, since)


def test_method_and_source_filters():
    config = TriggerConfig(
        triggerOn="checkin",
        additionalFilters={"method": ["QR"], "source": "kiosk"},
    )
    events = [
        {"id": 1, "checkInMethod": "QR", "source": "front-kiosk"},
        {"id": 2, "checkInMethod": "TAP", "source": "front-kiosk"},
        {"id": 3, "checkInMethod": "QR", "source": "web"},
        {"id": 4, "checkInMethod": "QR"},
    ]
    assert [e["id"] for e in filter_polled(config, events, 0)] == [1]


@pytest.mark.asyncio
async def test_poll_profiles_decorates_new_events(onetap_api, client):
    onetap_api.add("GET", "/api/profiles", {"data": [
        {"id": "new", "createdAt": NOW - 10},
        {"id": "old", "createdAt": NOW - 3600},
    ]})
    config = TriggerConfig(triggerOn="profile", environment="staging", pollInterval=5)

    events = await poll_events(client, config, NOW)

    assert events == [{
        "id": "new",
        "createdAt": NOW - 10,
        "triggerType": "profile",
        "environment": "staging",
        "triggeredAt": NOW,
    }]


@pytest.mark.asyncio
async def test_poll_errors_propagate_to_caller(onetap_api, client):
    onetap_api.add("GET", "/api/participants", OneTapAPIError("boom"))

    with pytest.raises(OneTapAPIError):
        await poll_events(client, TriggerConfig(triggerOn="checkin"), NOW)


class TestWebhookEvent:
    def test_forwards_with_metadata(self):
        config = TriggerConfig(triggerOn="checkin", environment="production")
        event = webhook_event(config, {"listId": "L1", "id": "PA1"}, {"x-a": "1"}, {"q": "2"}, now=NOW)
        assert event == {
            "listId": "L1",
            "id": "PA1",
            "triggerType": "checkin",
            "environment": "production",
            "triggeredAt": NOW,
            "headers": {"x-a": "1"},
            "query": {"q": "2"},
        }

    def test_rejects_non_object(self):
        config = TriggerConfig()
        assert webhook_event(config, ["not", "an", "object"]) is None
        assert webhook_event(config, "text") is None
        assert webhook_event(config, None) is None

    def test_list_filter(self):
        config = TriggerConfig(listId="L1")
        assert webhook_event(config, {"listId": "L2"}) is None
        assert webhook_event(config, {"listId": "L1"}) is not None
        assert webhook_event(config, {"id": "no list"}) is not None

    def test_profile_filter(self):
        config = TriggerConfig(profileId="P1")
        assert webhook_event(config, {"profileId": "P2"}) is None

    def test_method_filter(self):
        config = TriggerConfig(additionalFilters={"method": ["TAP"]})
        assert webhook_event(config, {"checkInMethod": "QR"}) is None
        assert webhook_event(config, {"method": "TAP"}) is not None
        assert webhook_event(config, {"id": "no method"}) is not None

    def test_source_filter(self):
        config = TriggerConfig(additionalFilters={"source": "kiosk"})
        assert webhook_event(config, {"source": "web"}) is None
        assert webhook_event(config, {"source": "lobby-kiosk"}) is not None
        assert webhook_event(config, {}) is not None

"""
Tests for the inbound webhook endpoint.
"""

import pytest
from fastapi.testclient import TestClient

from onetap.config import settings
from onetap.main import app
from onetap.webhooks.router import register_webhook_config, unregister_webhook_config
from onetap.workflows.engine.nodes.registry import NodeRegistry

TRIGGER_ID = "onetap.trigger"
URL = f"{settings.API_V1_STR}/webhooks/{TRIGGER_ID}"


@pytest.fixture
def client():
    NodeRegistry.reset()
    register_webhook_config(TRIGGER_ID, {"triggerOn": "checkin", "triggerMethod": "webhook", "listId": "L1"})
    yield TestClient(app)
    unregister_webhook_config(TRIGGER_ID)
    NodeRegistry.reset()


def test_unknown_node(client):
    response = client.post(f"{settings.API_V1_STR}/webhooks/does.not.exist", json={})
    assert response.status_code == 404


def test_node_without_webhook_support(client):
    response = client.post(f"{settings.API_V1_STR}/webhooks/onetap.onetap", json={})
    assert response.status_code == 400


def test_matching_payload_triggers(client):
    response = client.post(URL, json={"listId": "L1", "id": "PA1"}, params={"source": "onetap"})

    assert response.status_code == 200
    data = response.json()
    assert data["received"] is True
    assert data["triggered"] is True
    event = data["items"][0]
    assert event["id"] == "PA1"
    assert event["triggerType"] == "checkin"
    assert event["query"] == {"source": "onetap"}
    assert "content-type" in event["headers"]


def test_filtered_payload_is_acknowledged(client):
    response = client.post(URL, json={"listId": "OTHER"})

    assert response.status_code == 200
    assert response.json() == {"received": True, "triggered": False, "items": []}


def test_non_object_body_is_acknowledged(client):
    response = client.post(URL, content=b"plain text", headers={"content-type": "text/plain"})

    assert response.status_code == 200
    assert response.json()["triggered"] is False

"""
Organization integrations: webhook registrations on the OneTap side.
"""

from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.resources.base import Params, collection, require

PATH = "/api/organization/integrations"

DEFAULT_NAME = "n8n Integration"
DEFAULT_DESCRIPTION = "Webhook integration created from n8n"
SECRET_HEADER = "X-Webhook-Secret"


def build_webhook_settings(url: str, events: List[str], settings: Dict[str, Any]) -> Dict[str, Any]:
    active = settings.get("active")
    webhook_settings: Dict[str, Any] = {
        "url": url,
        "events": events,
        "isActive": True if active is None else active,
    }
    if settings.get("secret"):
        webhook_settings["headers"] = {SECRET_HEADER: settings["secret"]}
    return webhook_settings


def build_register_body(url: str, events: List[str], settings: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": settings.get("name") or DEFAULT_NAME,
        "description": settings.get("description") or DEFAULT_DESCRIPTION,
        "webhookSettings": build_webhook_settings(url, events, settings),
    }


def build_update_body(url: str, events: List[str], settings: Dict[str, Any]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"webhookSettings": build_webhook_settings(url, events, settings)}
    if settings.get("name"):
        body["name"] = settings["name"]
    if settings.get("description"):
        body["description"] = settings["description"]
    return body


def _data(response: Any) -> Dict[str, Any]:
    data = response.get("data") if isinstance(response, dict) else None
    return data if isinstance(data, dict) else {}


def _events(params: Params) -> List[str]:
    events = params.get("events")
    if events is None:
        return ["checkin"]
    return events if isinstance(events, list) else [events]


async def register(client: OneTapClient, params: Params, environment: str) -> List[Dict[str, Any]]:
    webhook_url = require(params, "webhookUrl")
    events = _events(params)
    body = build_register_body(webhook_url, events, collection(params, "additionalSettings"))

    response = await client.post(PATH, body)
    data = _data(response)
    integration_id = data.get("id") or (response.get("id") if isinstance(response, dict) else None)
    return [{
        "success": True,
        "operation": "register",
        "environment": environment,
        "integrationId": integration_id,
        "apiKey": data.get("apiKey"),
        "webhookUrl": webhook_url,
        "events": events,
        **data,
    }]


async def unregister(client: OneTapClient, params: Params, environment: str) -> List[Dict[str, Any]]:
    integration_id = require(params, "integrationId")
    response = await client.delete(f"{PATH}/{integration_id}")
    return [{
        "success": True,
        "operation": "unregister",
        "environment": environment,
        "integrationId": integration_id,
        **(response if isinstance(response, dict) else {}),
    }]


async def list_integrations(client: OneTapClient, params: Params, environment: str) -> List[Dict[str, Any]]:
    response = await client.get(PATH)
    base = {"operation": "list", "environment": environment}
    if isinstance(response, dict) and isinstance(response.get("data"), list):
        return [{**base, **integration} for integration in response["data"]]
    return [{**base, **(response if isinstance(response, dict) else {"data": response})}]


async def update(client: OneTapClient, params: Params, environment: str) -> List[Dict[str, Any]]:
    integration_id = require(params, "integrationId")
    webhook_url = require(params, "webhookUrl")
    events = _events(params)
    body = build_update_body(webhook_url, events, collection(params, "additionalSettings"))

    response = await client.put(f"{PATH}/{integration_id}", body)
    return [{
        "success": True,
        "operation": "update",
        "environment": environment,
        "integrationId": integration_id,
        **_data(response),
    }]


OPERATIONS = {
    "register": register,
    "unregister": unregister,
    "list": list_integrations,
    "update": update,
}

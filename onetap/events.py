"""
Trigger events: polling queries and event filters.

Polling keeps no cursor. Every cycle looks back ``pollInterval`` minutes
from the current wall-clock time, so events can be seen twice or missed.
"""

import logging
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from onetap.client import OneTapClient
from onetap.normalize import to_epoch_seconds

logger = logging.getLogger(__name__)

TriggerOn = Literal["checkin", "checkout", "participant", "profile"]

METHOD_FIELDS = {"checkin": "checkInMethod", "checkout": "checkOutMethod"}


class AdditionalFilters(BaseModel):
    model_config = ConfigDict(extra="ignore")

    method: List[str] = []
    source: Optional[str] = None

    @field_validator("method", mode="before")
    def coerce_method(cls, v):
        if v is None or v == "":
            return []
        return v if isinstance(v, list) else [v]


class TriggerConfig(BaseModel):
    """Parameters of the OneTap trigger node."""
    model_config = ConfigDict(extra="ignore")

    triggerOn: TriggerOn = "checkin"
    triggerMethod: Literal["polling", "webhook"] = "polling"
    environment: str = "production"
    pollInterval: float = 5
    listId: Optional[str] = None
    profileId: Optional[str] = None
    additionalFilters: AdditionalFilters = Field(default_factory=AdditionalFilters)

    @field_validator("additionalFilters", mode="before")
    def empty_filters(cls, v):
        return v or {}


def lookback_since(now: int, poll_interval_minutes: float) -> int:
    return int(now - poll_interval_minutes * 60)


def build_poll_request(config: TriggerConfig, since: int) -> Tuple[str, Dict[str, Any]]:
    """Endpoint path and query string for one polling cycle."""
    if config.triggerOn in ("checkin", "checkout"):
        checkin = config.triggerOn == "checkin"
        query: Dict[str, Any] = {
            "limit": 100,
            "skip": 0,
            "sortField": "checkInDate" if checkin else "checkOutDate",
            "sortOrder": "desc",
        }
        if checkin:
            query["gtCheckInDate"] = since
            query["checkedIn"] = True
        else:
            query["gtCheckOutDate"] = since
            query["checkedOut"] = True
        if config.listId:
            query["listId"] = config.listId
        if config.profileId:
            query["profileId"] = config.profileId
        return "/api/participants", query

    if config.triggerOn == "participant":
        query = {"limit": 100, "skip": 0, "sortField": "createdAt", "sortOrder": "desc"}
        if config.listId:
            query["listId"] = config.listId
        return "/api/participants", query

    return "/api/profiles", {"page": 0, "pageSize": 100, "sortBy": "createdAt", "sortOrder": "desc"}


def response_events(config: TriggerConfig, response: Any) -> List[Any]:
    if config.triggerOn == "profile":
        data = response.get("data") if isinstance(response, dict) else None
        if isinstance(data, list):
            return data
        return [data or response]
    return response if isinstance(response, list) else [response]


def created_after(event: Dict[str, Any], since: int) -> bool:
    """True when ``createdAt`` is later than ``since``, or when there is no ``createdAt``."""
    created_at = event.get("createdAt")
    if not created_at:
        return True
    try:
        return to_epoch_seconds(created_at) > since
    except ValueError:
        return False


def source_matches(event: Dict[str, Any], source: str) -> bool:
    value = event.get("source")
    return isinstance(value, str) and source in value


def filter_polled(config: TriggerConfig, events: List[Any], since: int) -> List[Dict[str, Any]]:
    filters = config.additionalFilters
    kept = [event for event in events if isinstance(event, dict)]

    if config.triggerOn in METHOD_FIELDS:
        if filters.method:
            field = METHOD_FIELDS[config.triggerOn]
            kept = [event for event in kept if event.get(field) in filters.method]
    else:
        kept = [event for event in kept if created_after(event, since)]

    if filters.source:
        kept = [event for event in kept if source_matches(event, filters.source)]
    return kept


def decorate(event: Dict[str, Any], config: TriggerConfig, now: int) -> Dict[str, Any]:
    return {
        **event,
        "triggerType": config.triggerOn,
        "environment": config.environment,
        "triggeredAt": now,
    }


async def poll_events(client: OneTapClient, config: TriggerConfig, now: int) -> List[Dict[str, Any]]:
    """
    Run one polling cycle and return the decorated events.

    Request failures propagate; the trigger node decides what to do with them.
    """
    since = lookback_since(now, config.pollInterval)
    path, query = build_poll_request(config, since)
    response = await client.get(path, query)

    events = filter_polled(config, response_events(config, response), since)
    logger.debug(f"Poll for '{config.triggerOn}' since {since} matched {len(events)} events")
    return [decorate(event, config, now) for event in events]


def webhook_event(
    config: TriggerConfig,
    body: Any,
    headers: Optional[Dict[str, Any]] = None,
    query: Optional[Dict[str, Any]] = None,
    now: int = 0,
) -> Optional[Dict[str, Any]]:
    """
    Turn an inbound webhook body into a trigger event.

    Returns None when the body is not a JSON object or a configured filter
    rejects it.
    """
    if not isinstance(body, dict):
        return None

    if config.listId and body.get("listId") and body["listId"] != config.listId:
        return None
    if config.profileId and body.get("profileId") and body["profileId"] != config.profileId:
        return None

    filters = config.additionalFilters
    if filters.method:
        method = body.get("method") or body.get("checkInMethod") or body.get("checkOutMethod")
        if method and method not in filters.method:
            return None

    if filters.source and body.get("source") and not source_matches(body, filters.source):
        return None

    return {
        **decorate(body, config, now),
        "headers": headers or {},
        "query": query or {},
    }

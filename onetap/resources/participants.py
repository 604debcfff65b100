"""
Participant operations.

A participant ties a profile to a list and carries its check-in/check-out
state. The listing endpoint pages with limit/skip and answers with a bare
array.
"""

from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.normalize import compact_fields, split_ids
from onetap.pagination import PARTICIPANTS_PAGING, list_records
from onetap.resources.base import Params, collection, raw, require

PATH = "/api/participants"

CHECK_DATES = ("checkInDate", "checkOutDate")

DEFAULT_LIMIT = 50


def build_create_body(params: Params) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    if params.get("listId"):
        body["listId"] = params["listId"]
    if params.get("listIds"):
        body["listIds"] = split_ids(params["listIds"])
    if params.get("profileId"):
        body["profileId"] = params["profileId"]
    if params.get("profileIds"):
        body["profileIds"] = split_ids(params["profileIds"])
    if params.get("addAllProfile"):
        body["addAllProfile"] = True

    body.update(compact_fields(
        collection(params, "additionalFields"),
        dates=CHECK_DATES,
        locations=("checkInLocation", "checkOutLocation"),
    ))
    return body


def build_update_body(fields: Dict[str, Any]) -> Dict[str, Any]:
    return compact_fields(fields, dates=CHECK_DATES, locations=("location",))


def build_check_body(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Check-in/check-out body; ``location`` is only sent when coordinates were given."""
    return compact_fields(fields, locations=("location",))


def build_list_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    return compact_fields(filters, dates=True)


async def create(client: OneTapClient, params: Params) -> List[Any]:
    return raw(await client.post(PATH, build_create_body(params)))


async def get_single(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    return raw(await client.get(f"{PATH}/{participant_id}"))


async def update(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    body = build_update_body(collection(params, "updateFields"))
    return raw(await client.put(f"{PATH}/{participant_id}", body))


async def get_all(client: OneTapClient, params: Params) -> List[Any]:
    limit = params.get("limit")
    return await list_records(
        lambda query: client.get(PATH, query),
        PARTICIPANTS_PAGING,
        build_list_query(collection(params, "additionalFields")),
        return_all=bool(params.get("returnAll")),
        page=params.get("skip"),
        page_size=DEFAULT_LIMIT if limit is None or limit == "" else limit,
    )


async def delete(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    query = {"listId": params["listId"]} if params.get("listId") else None
    return raw(await client.delete(f"{PATH}/{participant_id}", query))


async def check_in(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    body = build_check_body(collection(params, "checkFields"))
    return raw(await client.post(f"{PATH}/{participant_id}/checkin", body))


async def check_out(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    body = build_check_body(collection(params, "checkFields"))
    return raw(await client.post(f"{PATH}/{participant_id}/checkout", body))


async def undo_check_in(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    return raw(await client.post(f"{PATH}/{participant_id}/undoCheckin"))


async def undo_check_out(client: OneTapClient, params: Params) -> List[Any]:
    participant_id = require(params, "participantId")
    return raw(await client.post(f"{PATH}/{participant_id}/undoCheckout"))

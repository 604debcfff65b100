"""List operations: events or sessions participants check into."""

from typing import Any, List

from onetap.client import OneTapClient
from onetap.normalize import compact_fields
from onetap.pagination import LISTS_PAGING, list_records
from onetap.resources.base import Params, collection, raw, require, unwrap_data

PATH = "/api/lists"


async def get_all(client: OneTapClient, params: Params) -> List[Any]:
    return await list_records(
        lambda query: client.get(PATH, query),
        LISTS_PAGING,
        compact_fields(collection(params, "additionalFields"), dates=True),
        return_all=bool(params.get("returnAll")),
        page=params.get("page"),
        page_size=params.get("pageSize"),
    )


async def get_single(client: OneTapClient, params: Params) -> List[Any]:
    list_id = require(params, "listId")
    return unwrap_data(await client.get(f"{PATH}/{list_id}"))


async def create(client: OneTapClient, params: Params) -> List[Any]:
    body = compact_fields(collection(params, "listFields"), dates=True)
    return unwrap_data(await client.post(PATH, body))


async def update(client: OneTapClient, params: Params) -> List[Any]:
    list_id = require(params, "listId")
    body = compact_fields(collection(params, "updateFields"), dates=True)
    return unwrap_data(await client.put(f"{PATH}/{list_id}", body))


async def delete(client: OneTapClient, params: Params) -> List[Any]:
    list_id = require(params, "listId")
    return raw(await client.delete(f"{PATH}/{list_id}"))


async def get_survey(client: OneTapClient, params: Params) -> List[Any]:
    list_id = require(params, "listId")
    return unwrap_data(await client.get(f"{PATH}/{list_id}/survey"))

"""Passport operations."""

from typing import Any, List

from onetap.client import OneTapClient
from onetap.normalize import compact_fields
from onetap.pagination import PASSPORTS_PAGING, list_records
from onetap.resources.base import Params, collection, data_records, require, unwrap_data

PATH = "/api/passports"


async def get_all(client: OneTapClient, params: Params) -> List[Any]:
    return await list_records(
        lambda query: client.get(PATH, query),
        PASSPORTS_PAGING,
        compact_fields(collection(params, "additionalFields"), dates=True),
        return_all=bool(params.get("returnAll")),
        page=params.get("page"),
        page_size=params.get("pageSize"),
    )


async def get_groups(client: OneTapClient, params: Params) -> List[Any]:
    return data_records(await client.get(f"{PATH}/groups"))


async def send(client: OneTapClient, params: Params) -> List[Any]:
    passport_id = require(params, "passportId")
    body = compact_fields(collection(params, "sendFields"))
    return unwrap_data(await client.post(f"{PATH}/{passport_id}/send", body))

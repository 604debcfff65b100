"""Profile operations: visitor/member records."""

from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.normalize import build_custom_fields, compact_fields
from onetap.pagination import PROFILES_PAGING, list_records
from onetap.resources.base import Params, collection, data_records, raw, require, unwrap_data

PATH = "/api/profiles"

PROFILE_FIELDS = ("name", "email", "phone", "address", "notes", "checkInCode", "favorite")
FILTER_FIELDS = ("search", "sortBy", "sortOrder", "favorite")


def build_list_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    return compact_fields({k: filters.get(k) for k in FILTER_FIELDS})


def build_profile_body(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Profile create/update body; custom fields are flattened and coerced."""
    body = compact_fields({k: fields.get(k) for k in PROFILE_FIELDS})
    custom_fields = build_custom_fields(fields.get("customFields"))
    if custom_fields:
        body["customFields"] = custom_fields
    return body


async def get_all(client: OneTapClient, params: Params) -> List[Any]:
    return await list_records(
        lambda query: client.get(PATH, query),
        PROFILES_PAGING,
        build_list_query(collection(params, "additionalFields")),
        return_all=bool(params.get("returnAll")),
        page=params.get("page"),
        page_size=params.get("pageSize"),
    )


async def get_single(client: OneTapClient, params: Params) -> List[Any]:
    profile_id = require(params, "profileId")
    return unwrap_data(await client.get(f"{PATH}/{profile_id}"))


async def create(client: OneTapClient, params: Params) -> List[Any]:
    body = build_profile_body(collection(params, "profileFields"))
    return unwrap_data(await client.post(PATH, body))


async def update(client: OneTapClient, params: Params) -> List[Any]:
    profile_id = require(params, "profileId")
    body = build_profile_body(collection(params, "updateFields"))
    return unwrap_data(await client.put(f"{PATH}/{profile_id}", body))


async def delete(client: OneTapClient, params: Params) -> List[Any]:
    profile_id = require(params, "profileId")
    return raw(await client.delete(f"{PATH}/{profile_id}"))


async def update_avatar(client: OneTapClient, params: Params) -> List[Any]:
    body = {
        "profileId": require(params, "profileId"),
        "avatarUrl": require(params, "avatarUrl"),
    }
    return unwrap_data(await client.post(f"{PATH}/avatar", body))


async def get_custom_fields(client: OneTapClient, params: Params) -> List[Any]:
    return data_records(await client.get(f"{PATH}/customFields"))


async def get_by_check_in_code(client: OneTapClient, params: Params) -> List[Any]:
    query = {"checkInCode": require(params, "checkInCode")}
    return unwrap_data(await client.get(f"{PATH}/checkInCode", query))

"""Punch pass operations: redeemable multi-use passes tied to a profile."""

from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.normalize import compact_fields
from onetap.pagination import PUNCH_PASSES_PAGING, list_records
from onetap.resources.base import Params, collection, require, unwrap_data

PATH = "/api/passports/punch-passports"

FILTER_FIELDS = (
    "sortField", "sortDirection", "searchText", "searchType", "filterField",
    "equalTo", "notEqualTo", "greaterThan", "lessThan", "contains",
    "greaterThanDate", "lessThanDate",
)


def build_filter_query(filters: Dict[str, Any]) -> Dict[str, Any]:
    """Search/filter query; ``greaterThanDate``/``lessThanDate`` become epoch seconds."""
    return compact_fields({k: filters.get(k) for k in FILTER_FIELDS}, dates=True)


async def get_all(client: OneTapClient, params: Params) -> List[Any]:
    query = build_filter_query(collection(params, "additionalFields"))
    query["profileId"] = require(params, "profileId")
    return await list_records(
        lambda q: client.get(PATH, q),
        PUNCH_PASSES_PAGING,
        query,
        return_all=bool(params.get("returnAll")),
        page=params.get("page"),
        page_size=params.get("pageSize"),
    )


async def get_single(client: OneTapClient, params: Params) -> List[Any]:
    passport_id = require(params, "passportId")
    query: Dict[str, Any] = {}
    if not params.get("returnAll", False):
        query["page"] = params.get("page", 0)
        query["pageSize"] = params.get("pageSize", PUNCH_PASSES_PAGING.page_size)
    query.update(build_filter_query(collection(params, "additionalFields")))
    return unwrap_data(await client.get(f"{PATH}/{passport_id}", query))


async def redeem(client: OneTapClient, params: Params) -> List[Any]:
    passport_id = require(params, "passportId")
    body = compact_fields(collection(params, "redeemFields"), dates=True)
    return unwrap_data(await client.post(f"{PATH}/{passport_id}/redeem", body))

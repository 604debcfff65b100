"""
Generic paginator for OneTap listing endpoints.

Every "get all" style operation shares one loop: request a fixed-size page,
pull the records out of the response envelope, advance by page index or by
skip offset, and stop once a page comes back shorter than the page size (or
without the expected array). There is no total-count field involved, so a
last page that is exactly full costs one extra, empty request.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

Fetch = Callable[[Dict[str, Any]], Awaitable[Any]]


class EnvelopeShape(str, Enum):
    DATA = "data"                       # {"data": [...]}
    DATA_PASSPORTS = "data.passports"   # {"data": {"passports": [...]}}
    BARE = "bare"                       # [...] or a single object


class PageAdvance(str, Enum):
    INDEX = "index"     # page=0,1,2...
    OFFSET = "offset"   # skip=0,size,2*size...


def _from_data(response: Any) -> Optional[List[Any]]:
    data = response.get("data") if isinstance(response, dict) else None
    return data if isinstance(data, list) else None


def _from_data_passports(response: Any) -> Optional[List[Any]]:
    data = response.get("data") if isinstance(response, dict) else None
    passports = data.get("passports") if isinstance(data, dict) else None
    return passports if isinstance(passports, list) else None


def _from_bare(response: Any) -> Optional[List[Any]]:
    return response if isinstance(response, list) else [response]


EXTRACTORS: Dict[EnvelopeShape, Callable[[Any], Optional[List[Any]]]] = {
    EnvelopeShape.DATA: _from_data,
    EnvelopeShape.DATA_PASSPORTS: _from_data_passports,
    EnvelopeShape.BARE: _from_bare,
}


def extract_records(response: Any, shape: EnvelopeShape) -> Optional[List[Any]]:
    """
    Pull the record array out of ``response``.

    Returns:
        The records, or None when the envelope lacks the expected array.
        ``BARE`` never returns None: a single object becomes one record.
    """
    return EXTRACTORS[shape](response)


@dataclass(frozen=True)
class PaginationSpec:
    """How one listing endpoint pages."""
    page_field: str
    size_field: str
    page_size: int
    advance: PageAdvance = PageAdvance.INDEX
    envelope: EnvelopeShape = EnvelopeShape.DATA
    start: int = 0


PROFILES_PAGING = PaginationSpec("page", "pageSize", 50)
PUNCH_PASSES_PAGING = PaginationSpec("page", "pageSize", 50, envelope=EnvelopeShape.DATA_PASSPORTS)
PARTICIPANTS_PAGING = PaginationSpec(
    "skip", "limit", 100, advance=PageAdvance.OFFSET, envelope=EnvelopeShape.BARE
)
LISTS_PAGING = PaginationSpec("page", "pageSize", 100)
PASSPORTS_PAGING = PaginationSpec("page", "pageSize", 50)


@dataclass
class PageResult:
    records: List[Any] = field(default_factory=list)
    requests: int = 0


async def paginate(fetch: Fetch, spec: PaginationSpec, query: Optional[Dict[str, Any]] = None) -> PageResult:
    """
    Fetch every page sequentially and accumulate the records.

    Args:
        fetch: Coroutine function issuing one request for the given query
        spec: Paging parameters of the endpoint
        query: Filters sent with every page

    Returns:
        All records in fetch order, plus the number of requests made
    """
    result = PageResult()
    position = spec.start

    while True:
        page_query = {
            **(query or {}),
            spec.page_field: position,
            spec.size_field: spec.page_size,
        }
        response = await fetch(page_query)
        result.requests += 1

        records = extract_records(response, spec.envelope)
        if records is None:
            logger.debug(f"Page {result.requests} has no '{spec.envelope.value}' array; stopping")
            break

        result.records.extend(records)
        if len(records) < spec.page_size:
            break

        if spec.advance == PageAdvance.OFFSET:
            position += spec.page_size
        else:
            position += 1

    logger.debug(f"Fetched {len(result.records)} records in {result.requests} requests")
    return result


async def fetch_single_page(fetch: Fetch, spec: PaginationSpec, query: Dict[str, Any]) -> List[Any]:
    """
    Issue exactly one listing request with the caller's own paging values.

    Returns the extracted records, or the raw response as a single record
    when the envelope lacks the expected array.
    """
    response = await fetch(query)
    records = extract_records(response, spec.envelope)
    if records is None:
        return [response]
    return records


async def list_records(
    fetch: Fetch,
    spec: PaginationSpec,
    query: Dict[str, Any],
    *,
    return_all: bool,
    page: Any = None,
    page_size: Any = None,
) -> List[Any]:
    """
    Run a listing operation: every page when ``return_all`` is set, otherwise
    the single page the caller asked for.
    """
    if return_all:
        return (await paginate(fetch, spec, query)).records

    page_query = {
        spec.page_field: spec.start if page is None else page,
        spec.size_field: spec.page_size if page_size is None else page_size,
        **query,
    }
    return await fetch_single_page(fetch, spec, page_query)

"""
Shared helpers for OneTap resource operations.

An operation handler is a coroutine ``handler(client, params)`` taking the
item's resolved node parameters and returning the records to emit.
"""

from typing import Any, Awaitable, Callable, Dict, List

from onetap.client import OneTapClient

Params = Dict[str, Any]
Handler = Callable[[OneTapClient, Params], Awaitable[List[Any]]]


def require(params: Params, name: str) -> Any:
    """
    Return a required parameter.

    Raises:
        ValueError: If the parameter is missing or empty
    """
    value = params.get(name)
    if value is None or value == "":
        raise ValueError(f"Parameter '{name}' is required")
    return value


def collection(params: Params, name: str) -> Dict[str, Any]:
    """An optional collection parameter, ``{}`` when unset."""
    return params.get(name) or {}


def unwrap_data(response: Any) -> List[Any]:
    """
    ``{"data": obj}`` -> ``[obj]``; anything else is emitted as-is.

    An empty object or array under ``data`` still counts as present.
    """
    if isinstance(response, dict):
        data = response.get("data")
        if isinstance(data, (dict, list)) or data:
            return [data]
    return [response]


def data_records(response: Any) -> List[Any]:
    """One record per element of ``data`` when it is an array, else the raw response."""
    if isinstance(response, dict) and isinstance(response.get("data"), list):
        return list(response["data"])
    return [response]


def raw(response: Any) -> List[Any]:
    return [response]

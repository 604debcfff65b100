"""
OneTap resources and the (resource, operation) dispatch table.
"""

from typing import Any, Dict, List, Tuple

from onetap.client import OneTapClient
from onetap.resources import lists, participants, passports, profiles, punch_passes
from onetap.resources.base import Handler, Params

OPERATIONS: Dict[Tuple[str, str], Handler] = {
    ("profile", "getAll"): profiles.get_all,
    ("profile", "getSingle"): profiles.get_single,
    ("profile", "create"): profiles.create,
    ("profile", "update"): profiles.update,
    ("profile", "delete"): profiles.delete,
    ("profile", "updateAvatar"): profiles.update_avatar,
    ("profile", "getCustomFields"): profiles.get_custom_fields,
    ("profile", "getByCheckInCode"): profiles.get_by_check_in_code,

    ("punchPasses", "getAll"): punch_passes.get_all,
    ("punchPasses", "getSingle"): punch_passes.get_single,
    ("punchPasses", "redeem"): punch_passes.redeem,

    ("participants", "create"): participants.create,
    ("participants", "getSingle"): participants.get_single,
    ("participants", "update"): participants.update,
    ("participants", "getAll"): participants.get_all,
    ("participants", "delete"): participants.delete,
    ("participants", "checkIn"): participants.check_in,
    ("participants", "checkOut"): participants.check_out,
    ("participants", "undoCheckIn"): participants.undo_check_in,
    ("participants", "undoCheckOut"): participants.undo_check_out,

    ("lists", "getAll"): lists.get_all,
    ("lists", "getSingle"): lists.get_single,
    ("lists", "create"): lists.create,
    ("lists", "update"): lists.update,
    ("lists", "delete"): lists.delete,
    ("lists", "getSurvey"): lists.get_survey,

    ("passports", "getAll"): passports.get_all,
    ("passports", "getGroups"): passports.get_groups,
    ("passports", "send"): passports.send,
}


def get_handler(resource: str, operation: str) -> Handler:
    """
    Raises:
        ValueError: If the resource does not support the operation
    """
    handler = OPERATIONS.get((resource, operation))
    if handler is None:
        raise ValueError(f"The operation '{operation}' is not supported for resource '{resource}'")
    return handler


async def run_operation(client: OneTapClient, resource: str, operation: str, params: Params) -> List[Any]:
    """Execute one operation for one item and return the records to emit."""
    return await get_handler(resource, operation)(client, params)


__all__ = ["OPERATIONS", "get_handler", "run_operation"]

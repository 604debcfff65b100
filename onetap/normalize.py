"""
Parameter normalization

Pure functions that turn node parameter values into OneTap query-string and
body shapes. Identical input always yields identical output.
"""

import json
import math
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

DateLike = Union[str, int, float, datetime]


def is_empty(value: Any) -> bool:
    """``None`` and ``""`` count as "not set"; ``False`` and ``0`` do not."""
    return value is None or value == ""


def is_date_key(key: str) -> bool:
    return "Date" in key


def to_epoch_seconds(value: DateLike) -> int:
    """
    Convert a date value to whole seconds since the Unix epoch (floored).

    ISO-8601 strings (a trailing ``Z`` is accepted) and datetimes are
    supported; naive values are taken as UTC. Numbers are already seconds.

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid date value: {value!r}")
    if isinstance(value, (int, float)):
        return int(math.floor(value))

    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid date value: {value!r}") from None
    else:
        raise ValueError(f"Invalid date value: {value!r}")

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(math.floor(moment.timestamp()))


def split_ids(value: Union[str, Iterable[str], None]) -> List[str]:
    """``"a, b ,c"`` -> ``["a", "b", "c"]``; blank entries are dropped."""
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else value
    return [str(part).strip() for part in parts if str(part).strip()]


def promote_coordinates(value: Any) -> Optional[Dict[str, Any]]:
    """
    Pull ``{lat, lng}`` out of a location collection (``{"coordinates": {...}}``).

    Returns None when no coordinates were entered.
    """
    if not isinstance(value, Mapping):
        return None
    coordinates = value.get("coordinates")
    if isinstance(coordinates, list):
        coordinates = coordinates[0] if coordinates else None
    return dict(coordinates) if coordinates else None


def compact_fields(
    fields: Optional[Mapping[str, Any]],
    *,
    dates: Union[bool, Iterable[str]] = False,
    locations: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Copy the set values of ``fields``, in order.

    Args:
        fields: Raw parameter collection
        dates: True to convert every key containing "Date" to epoch seconds,
            or an explicit set of keys to convert
        locations: Keys holding a location collection to promote to ``{lat, lng}``

    Returns:
        New mapping without unset values; explicit booleans are kept
    """
    convert_all = dates is True
    date_keys = set() if isinstance(dates, bool) else set(dates)
    location_keys = set(locations)
    result: Dict[str, Any] = {}

    for key, value in (fields or {}).items():
        if is_empty(value):
            continue
        if key in location_keys:
            coordinates = promote_coordinates(value)
            if coordinates:
                result[key] = coordinates
        elif (convert_all and is_date_key(key)) or key in date_keys:
            result[key] = to_epoch_seconds(value)
        else:
            result[key] = value

    return result


LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _parse_number(value: Any) -> Optional[Union[int, float]]:
    """Read the leading number of ``value`` (``"5 kg"`` -> 5); None when there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = LEADING_NUMBER.match(str(value))
        if not match:
            return None
        number = float(match.group(0))
    if not math.isfinite(number):
        return None
    if number.is_integer():
        return int(number)
    return number


def coerce_custom_field(value: Any, field_type: Optional[str]) -> Any:
    """Coerce one custom-field value according to its declared type tag."""
    if field_type == "number":
        return _parse_number(value)
    if field_type == "boolean":
        return value in ("true", True, "1", 1)
    if field_type == "array":
        if isinstance(value, list):
            return value
        try:
            return json.loads(value)
        except (TypeError, ValueError):
            return [part.strip() for part in str(value).split(",")]
    if field_type == "date":
        return to_epoch_seconds(value)
    return value


def build_custom_fields(collection: Any) -> Dict[str, Any]:
    """
    Flatten a ``customFields`` repeating group into ``{name: coerced value}``.

    Accepts ``{"customField": [{name, type, value}, ...]}`` or the list itself.
    Entries without a name or value are skipped.
    """
    if isinstance(collection, Mapping):
        entries = collection.get("customField") or []
    else:
        entries = collection or []

    result: Dict[str, Any] = {}
    for entry in entries:
        name = entry.get("name")
        value = entry.get("value")
        if not name or is_empty(value):
            continue
        result[name] = coerce_custom_field(value, entry.get("type"))
    return result

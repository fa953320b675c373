"""Helpers shared by the services and the request layer."""

import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from carrental.errors import ValidationError


def parse_datetime(value: Any, field_name: str = "date") -> datetime:
    """
    Parse an ISO-8601 date or datetime into a naive datetime.

    Aware values are converted to UTC first so every stored timestamp
    compares against every other one.

    Args:
        value: A datetime, a date or an ISO formatted string
        field_name: Name used in the error message

    Returns:
        datetime: The parsed value

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError(f"Invalid {field_name}: {value}")
    else:
        raise ValidationError(f"Invalid {field_name}: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_optional_datetime(value: Any, field_name: str = "date") -> Optional[datetime]:
    """Like parse_datetime but passes None and empty strings through."""
    if value is None or value == "":
        return None
    return parse_datetime(value, field_name)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def paginate(items: Sequence[Any], page: int = 1, limit: int = 10) -> Tuple[List[Any], Dict[str, int]]:
    """
    Slice a sequence into one page.

    Returns:
        Tuple: (items on the page, pagination dict with page/limit/total/pages)
    """
    page = max(1, int(page))
    limit = max(1, int(limit))
    total = len(items)
    offset = (page - 1) * limit

    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit),
    }
    return list(items[offset:offset + limit]), pagination

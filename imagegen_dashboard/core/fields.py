"""
Field access shared by the aggregations.

Records reach the engine either as dataclass instances from the store or as
plain mappings, so fields are looked up by name on both.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional

from imagegen_dashboard.storage.models import parse_timestamp


def field_value(record: Any, name: str) -> Any:
    """Return a named field of a record, or None if it is absent."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def record_timestamp(record: Any, name: str) -> Optional[datetime]:
    """Return the parsed UTC timestamp stored in a record field, if any."""
    return parse_timestamp(field_value(record, name))


def as_utc(now: datetime) -> datetime:
    """Normalize a reference time to aware UTC.

    Raises:
        ValueError: If now is not a datetime
    """
    if not isinstance(now, datetime):
        raise ValueError("now must be a datetime")
    return parse_timestamp(now)

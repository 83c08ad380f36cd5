"""
Record filtering by text and time window.

Every filter returns a new list and leaves the input untouched. Relative
order of the surviving records is always preserved.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Any, List, Optional, Sequence

from .fields import as_utc, field_value, record_timestamp

logger = logging.getLogger(__name__)

_TIME_RANGE_PATTERN = re.compile(r"^\s*(\d+)\s*[dD]?\s*$")

# Filter value that disables a gallery facet
MATCH_ALL = "all"


def filter_by_text(
    records: Sequence[Any],
    query: str,
    fields: Sequence[str]
) -> List[Any]:
    """Keep records where any of the given text fields contains the query.

    Matching is a case-insensitive substring test. Fields that are missing
    or not strings never match. An empty query keeps every record.

    Args:
        records: Records to filter
        query: Search text
        fields: Names of the text fields to search

    Returns:
        Matching records in their original order
    """
    if not query:
        return list(records)

    needle = query.lower()
    matches = []
    for record in records:
        for name in fields:
            value = field_value(record, name)
            if isinstance(value, str) and needle in value.lower():
                matches.append(record)
                break
    return matches


def filter_by_window(
    records: Sequence[Any],
    window_days: int,
    now: datetime,
    timestamp_field: str = "created_at"
) -> List[Any]:
    """Keep records whose timestamp lies within the last ``window_days`` days.

    The window is ``[now - window_days, now]`` with both ends included.
    Records with a missing or unparseable timestamp are left out.

    Args:
        records: Records to filter
        window_days: Window length in days (must be positive)
        now: Reference time; naive values are taken as UTC
        timestamp_field: Name of the timestamp field

    Returns:
        Records inside the window in their original order

    Raises:
        ValueError: If window_days is not a positive integer
    """
    _require_positive_days(window_days)

    end = as_utc(now)
    start = end - timedelta(days=window_days)

    inside = []
    for record in records:
        moment = record_timestamp(record, timestamp_field)
        if moment is None:
            logger.debug("Skipping record with unparseable %s: %r", timestamp_field, record)
            continue
        if start <= moment <= end:
            inside.append(record)
    return inside


def filter_gallery(
    images: Sequence[Any],
    query: str = "",
    size: Optional[str] = None,
    quality: Optional[str] = None
) -> List[Any]:
    """Apply the gallery's prompt search and size/quality facets together.

    A size or quality of None or ``"all"`` matches every image.
    """
    matches = []
    for image in filter_by_text(images, query, ["prompt"]):
        if size not in (None, MATCH_ALL) and field_value(image, "size") != size:
            continue
        if quality not in (None, MATCH_ALL) and field_value(image, "quality") != quality:
            continue
        matches.append(image)
    return matches


def count_unplaceable(
    records: Sequence[Any],
    timestamp_field: str = "created_at"
) -> int:
    """Count records that time-based aggregations cannot place.

    Args:
        records: Records to inspect
        timestamp_field: Name of the timestamp field

    Returns:
        Number of records whose timestamp is missing or unparseable
    """
    return sum(1 for record in records if record_timestamp(record, timestamp_field) is None)


def parse_time_range(value: Any) -> int:
    """Convert a time range selector such as ``"30d"`` into a day count.

    Accepts ``"<n>d"`` strings and bare positive integers.

    Raises:
        ValueError: If the value is not a positive day count
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid time range: {value!r}")
    if isinstance(value, int):
        days = value
    else:
        match = _TIME_RANGE_PATTERN.match(str(value))
        if not match:
            raise ValueError(f"Invalid time range: {value!r} (expected e.g. '7d', '30d', '90d')")
        days = int(match.group(1))

    if days <= 0:
        raise ValueError(f"Time range must be at least one day: {value!r}")
    return days


def _require_positive_days(window_days: int) -> None:
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days <= 0:
        raise ValueError("window_days must be a positive integer")


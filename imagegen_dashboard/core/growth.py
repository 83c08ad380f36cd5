"""
Monthly growth series.

Only months that contain at least one record appear in the series; a month
with no records is omitted rather than reported as zero.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .fields import record_timestamp

logger = logging.getLogger(__name__)

# Fixed English abbreviations so labels do not follow the host locale
_MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class MonthlyCount:
    """Number of records created in one UTC calendar month."""
    month: str  # YYYY-MM
    label: str  # e.g. "Jan 2024"
    count: int


def month_label(month: str) -> str:
    """Turn a ``YYYY-MM`` key into a display label such as ``Jan 2024``."""
    year, month_number = month.split("-")
    return f"{_MONTH_ABBREVIATIONS[int(month_number) - 1]} {year}"


def monthly_growth(
    records: Sequence[Any],
    timestamp_field: str = "created_at",
    months_back: int = 6
) -> List[MonthlyCount]:
    """Count records per UTC calendar month.

    Args:
        records: Records to group (typically users)
        timestamp_field: Name of the timestamp field
        months_back: How many of the most recent months with data to keep

    Returns:
        Up to ``months_back`` entries in chronological order

    Raises:
        ValueError: If months_back is negative
    """
    if months_back < 0:
        raise ValueError("months_back cannot be negative")

    counts: Dict[str, int] = {}
    skipped = 0
    for record in records:
        moment = record_timestamp(record, timestamp_field)
        if moment is None:
            skipped += 1
            continue
        key = f"{moment.year:04d}-{moment.month:02d}"
        counts[key] = counts.get(key, 0) + 1

    if skipped:
        logger.debug("Left %d record(s) with unparseable %s out of monthly growth", skipped, timestamp_field)

    if months_back == 0:
        return []

    months = sorted(counts)[-months_back:]
    return [
        MonthlyCount(month=month, label=month_label(month), count=counts[month])
        for month in months
    ]

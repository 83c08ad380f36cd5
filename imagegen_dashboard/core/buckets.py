"""
Per-day activity buckets.

Groups records into consecutive UTC calendar days for the daily activity
view and its CSV export.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Sequence, Set

from .fields import as_utc, field_value, record_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyStat:
    """Activity on one UTC calendar day."""
    date: str  # YYYY-MM-DD
    users: int  # distinct users active that day
    images: int

    def __post_init__(self):
        """Validate counts are reasonable."""
        if self.users < 0:
            raise ValueError("users cannot be negative")
        if self.images < 0:
            raise ValueError("images cannot be negative")
        if self.users > self.images:
            raise ValueError("users cannot exceed images")


def bucket_by_day(
    records: Sequence[Any],
    window_days: int,
    now: datetime,
    timestamp_field: str = "created_at",
    user_field: str = "user_id"
) -> List[DailyStat]:
    """Count records and distinct users per day over the last ``window_days`` days.

    Buckets run from the oldest day to the UTC calendar date of ``now`` with
    no gaps; days without records are reported with zero counts. Records are
    placed by the UTC date of their timestamp, so the result does not depend
    on the host's timezone. Records with an unparseable timestamp, or dated
    outside the buckets, are left out.

    Args:
        records: Records to bucket
        window_days: Number of days to report (0 gives an empty list)
        now: Reference time; its UTC date is the newest bucket
        timestamp_field: Name of the timestamp field
        user_field: Name of the field identifying the acting user

    Returns:
        Exactly ``window_days`` DailyStat entries, oldest first

    Raises:
        ValueError: If window_days is negative
    """
    if isinstance(window_days, bool) or not isinstance(window_days, int) or window_days < 0:
        raise ValueError("window_days must be a non-negative integer")

    today = as_utc(now).date()
    days = [today - timedelta(days=offset) for offset in range(window_days - 1, -1, -1)]

    image_counts: Dict[date, int] = {day: 0 for day in days}
    user_sets: Dict[date, Set[Any]] = {day: set() for day in days}

    skipped = 0
    for record in records:
        moment = record_timestamp(record, timestamp_field)
        if moment is None:
            skipped += 1
            continue
        day = moment.date()
        if day not in image_counts:
            continue
        image_counts[day] += 1
        user = field_value(record, user_field)
        if user is not None:
            user_sets[day].add(user)

    if skipped:
        logger.debug("Left %d record(s) with unparseable %s out of daily buckets", skipped, timestamp_field)

    return [
        DailyStat(
            date=day.isoformat(),
            users=len(user_sets[day]),
            images=image_counts[day]
        )
        for day in days
    ]


def average_per_day(daily_stats: Sequence[DailyStat]) -> float:
    """Mean number of images per bucket, 0.0 when there are no buckets."""
    if not daily_stats:
        return 0.0
    return sum(stat.images for stat in daily_stats) / len(daily_stats)

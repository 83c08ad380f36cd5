"""
CSV export of the daily activity series.
"""

from typing import Sequence

from .buckets import DailyStat

CSV_HEADER = "Date,Users,Images"


def export_csv(daily_stats: Sequence[DailyStat]) -> str:
    """Serialize daily buckets as CSV text.

    Rows are joined with ``\\n`` and the text has no trailing newline.
    Fields are never quoted since dates and counts contain no commas.

    Args:
        daily_stats: Buckets in chronological order

    Returns:
        CSV text starting with the ``Date,Users,Images`` header
    """
    rows = [CSV_HEADER]
    rows.extend(f"{stat.date},{stat.users},{stat.images}" for stat in daily_stats)
    return "\n".join(rows)


def export_filename(range_label: str) -> str:
    """Default download name for an export, e.g. ``analytics-30d.csv``."""
    return f"analytics-{range_label}.csv"

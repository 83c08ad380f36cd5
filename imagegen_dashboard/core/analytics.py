"""
Analytics view composition.

Builds the analytics snapshot (overview counts, daily activity, popular
prompts and user growth) from bulk-fetched records.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from imagegen_dashboard.config.loader import DashboardSettings, default_settings
from imagegen_dashboard.storage.models import ImageRecord, UserRecord
from imagegen_dashboard.storage.repository import RecordRepository

from .buckets import DailyStat, average_per_day, bucket_by_day
from .filters import count_unplaceable, filter_by_window
from .growth import MonthlyCount, monthly_growth
from .ranking import FrequencyEntry, top_by_frequency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsSnapshot:
    """Point-in-time analytics for one time window. Never persisted."""
    window_days: int
    total_users: int
    total_images: int
    daily_stats: List[DailyStat]
    top_prompts: List[FrequencyEntry]
    user_growth: List[MonthlyCount]
    average_images_per_day: float
    active_users: int  # distinct image owners inside the window
    skipped_images: int  # images with an unparseable created_at
    skipped_users: int  # users with an unparseable created_at


def compute_analytics(
    users: Sequence[UserRecord],
    images: Sequence[ImageRecord],
    window_days: int,
    now: datetime,
    top_limit: int = 10,
    truncate_length: int = 50,
    months_back: int = 6
) -> AnalyticsSnapshot:
    """Compute the analytics snapshot for a time window.

    Popular prompts and active users only consider images inside the
    window. Active users counts each image owner once across the whole
    window, so a user active on several days is not counted twice.

    Args:
        users: All loaded users
        images: All loaded images
        window_days: Window length in days
        now: Reference time closing the window
        top_limit: Number of popular prompts to report
        truncate_length: Prompt length used for grouping
        months_back: Number of months in the growth series

    Returns:
        AnalyticsSnapshot for the window
    """
    windowed_images = filter_by_window(images, window_days, now)
    daily_stats = bucket_by_day(images, window_days, now)

    top_prompts = top_by_frequency(
        windowed_images,
        key_fn=lambda image: image.prompt,
        limit=top_limit,
        truncate_length=truncate_length
    )

    snapshot = AnalyticsSnapshot(
        window_days=window_days,
        total_users=len(users),
        total_images=len(images),
        daily_stats=daily_stats,
        top_prompts=top_prompts,
        user_growth=monthly_growth(users, months_back=months_back),
        average_images_per_day=average_per_day(daily_stats),
        active_users=len({image.user_id for image in windowed_images}),
        skipped_images=count_unplaceable(images),
        skipped_users=count_unplaceable(users)
    )

    if snapshot.skipped_images or snapshot.skipped_users:
        logger.warning(
            "Analytics left out %d image(s) and %d user(s) with unparseable timestamps",
            snapshot.skipped_images,
            snapshot.skipped_users
        )
    return snapshot


def load_analytics(
    repository: RecordRepository,
    window_days: int,
    now: datetime,
    settings: Optional[DashboardSettings] = None
) -> AnalyticsSnapshot:
    """Fetch records from the store and compute the analytics snapshot.

    Store failures propagate unchanged; no partial snapshot is built.

    Args:
        repository: Record store to read from
        window_days: Window length in days
        now: Reference time closing the window
        settings: Dashboard settings (defaults when omitted)

    Returns:
        AnalyticsSnapshot for the window

    Raises:
        RecordStoreError: If users or images cannot be loaded
    """
    settings = settings or default_settings()
    analytics = settings.analytics

    users = repository.list_users(limit=analytics.page_size)
    images = repository.list_images(limit=analytics.page_size)

    return compute_analytics(
        users,
        images,
        window_days,
        now,
        top_limit=analytics.top_prompts_limit,
        truncate_length=analytics.prompt_truncate_length,
        months_back=analytics.growth_months
    )

"""
Admin dashboard overview.

Headline counts and the recent activity feed shown on the admin landing page.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence

from imagegen_dashboard.storage.models import ImageRecord, UserRecord, parse_timestamp

from .fields import as_utc
from .filters import filter_by_window
from .ranking import truncate_text

ACTIVE_USER_WINDOW_DAYS = 7
ACTIVITY_PROMPT_LENGTH = 50


class ActivityType(Enum):
    """Kinds of entries in the activity feed."""
    USER_JOINED = "user_joined"
    IMAGE_GENERATED = "image_generated"


@dataclass(frozen=True)
class DashboardStats:
    """Headline counts for the admin dashboard."""
    total_users: int
    total_images: int
    images_this_month: int
    active_users: int  # distinct image owners in the last 7 days


@dataclass(frozen=True)
class ActivityEntry:
    """One line of the recent activity feed."""
    id: str
    type: ActivityType
    message: str
    timestamp: Optional[str]
    user_id: str
    user_email: Optional[str] = None


def compute_dashboard_stats(
    users: Sequence[UserRecord],
    images: Sequence[ImageRecord],
    now: datetime
) -> DashboardStats:
    """Compute the admin dashboard's headline counts.

    "This month" starts at midnight UTC on the first day of the month of
    ``now``.
    """
    end = as_utc(now)
    month_start = datetime(end.year, end.month, 1, tzinfo=timezone.utc)

    images_this_month = 0
    for image in images:
        moment = parse_timestamp(image.created_at)
        if moment is not None and month_start <= moment <= end:
            images_this_month += 1

    recent = filter_by_window(images, ACTIVE_USER_WINDOW_DAYS, end)

    return DashboardStats(
        total_users=len(users),
        total_images=len(images),
        images_this_month=images_this_month,
        active_users=len({image.user_id for image in recent})
    )


def recent_activity(
    users: Sequence[UserRecord],
    images: Sequence[ImageRecord],
    image_limit: int = 5,
    user_limit: int = 3,
    limit: int = 10
) -> List[ActivityEntry]:
    """Build the activity feed from the first images and users in each list.

    Inputs are expected newest first, as the store returns them. Entries
    are ordered by timestamp, newest first; entries whose timestamp cannot
    be parsed go last.
    """
    emails = {user.id: user.email for user in users}

    entries = []
    for image in images[:image_limit]:
        entries.append(ActivityEntry(
            id=f"img-{image.id}",
            type=ActivityType.IMAGE_GENERATED,
            message=f'Image generated: "{truncate_text(image.prompt, ACTIVITY_PROMPT_LENGTH)}"',
            timestamp=image.created_at,
            user_id=image.user_id,
            user_email=emails.get(image.user_id)
        ))
    for user in users[:user_limit]:
        entries.append(ActivityEntry(
            id=f"user-{user.id}",
            type=ActivityType.USER_JOINED,
            message="New user registered",
            timestamp=user.created_at,
            user_id=user.id,
            user_email=user.email
        ))

    def _sort_key(entry: ActivityEntry):
        moment = parse_timestamp(entry.timestamp)
        if moment is None:
            return (1, 0.0)
        return (0, -moment.timestamp())

    return sorted(entries, key=_sort_key)[:limit]

"""
Data models for storage layer.

Defines the user and generated-image records kept by the record store.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class UserRole(Enum):
    """Roles a dashboard user can hold."""
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class ImageSize(Enum):
    """Image sizes accepted by the generation form."""
    SQUARE = "1024x1024"
    LANDSCAPE = "1792x1024"
    PORTRAIT = "1024x1792"


class ImageQuality(Enum):
    """Image quality levels accepted by the generation form."""
    AUTO = "auto"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImageStyle(Enum):
    """Rendering style passed through to the image model."""
    VIVID = "vivid"
    NATURAL = "natural"


@dataclass(frozen=True)
class ImageRecord:
    """Immutable record of a successful image generation.

    Timestamps are kept as the ISO-8601 strings the store returns, so a
    malformed value survives loading and is dealt with by the aggregations.
    """
    id: str
    user_id: str
    url: str
    prompt: str
    size: str
    quality: str
    created_at: str


@dataclass(frozen=True)
class UserRecord:
    """Registered dashboard user."""
    id: str
    email: str
    display_name: Optional[str] = None
    role: str = UserRole.USER.value
    created_at: Optional[str] = None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Accepts a trailing ``Z`` as well as numeric offsets. Naive values are
    taken to be UTC. Datetime instances are normalized the same way.

    Args:
        value: Raw timestamp value from a record

    Returns:
        Aware datetime in UTC, or None if the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        # offset pushes the instant outside the supported year range
        return None


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as the ISO-8601 UTC string stored on records."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    utc = moment.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

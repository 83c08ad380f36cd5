"""
User management view.

Per-user image counts, role tallies and the role-change pass-through.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Sequence

from imagegen_dashboard.storage.models import ImageRecord, UserRecord, UserRole
from imagegen_dashboard.storage.repository import RecordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserSummary:
    """A user together with the number of images they generated."""
    user: UserRecord
    image_count: int


def summarize_users(
    users: Sequence[UserRecord],
    images: Sequence[ImageRecord]
) -> List[UserSummary]:
    """Attach image counts to users, keeping the user order."""
    counts = Counter(image.user_id for image in images)
    return [UserSummary(user=user, image_count=counts.get(user.id, 0)) for user in users]


def role_counts(users: Sequence[UserRecord]) -> Dict[UserRole, int]:
    """Count users per role.

    Every role is present in the result. A missing role counts as
    ``user``; a role outside the enumeration is not counted.
    """
    counts = {role: 0 for role in UserRole}
    for user in users:
        try:
            role = UserRole(user.role or UserRole.USER.value)
        except ValueError:
            logger.debug("User %s has unknown role %r", user.id, user.role)
            continue
        counts[role] += 1
    return counts


def change_user_role(repository: RecordRepository, user_id: str, role: str) -> bool:
    """Change a user's role through the record store.

    Args:
        repository: Record store to write to
        user_id: User to update
        role: New role, one of the UserRole values

    Returns:
        True if the store updated the user, False otherwise

    Raises:
        ValueError: If role is not a known role
        RecordStoreError: If the store cannot be written
    """
    try:
        UserRole(role)
    except ValueError:
        valid_roles = [r.value for r in UserRole]
        raise ValueError(f"role must be one of: {valid_roles}")

    return repository.update_user_role(user_id, role)

"""
Unit tests for the user management view.
"""

from unittest.mock import Mock

import pytest

from imagegen_dashboard.core.users import change_user_role, role_counts, summarize_users
from imagegen_dashboard.storage.models import ImageRecord, UserRecord, UserRole


def make_image(image_id: str, user_id: str) -> ImageRecord:
    """Create a test image record."""
    return ImageRecord(
        id=image_id,
        user_id=user_id,
        url=f"https://images.example.com/{image_id}.png",
        prompt="a cat",
        size="1024x1024",
        quality="high",
        created_at="2024-01-01T00:00:00Z"
    )


class TestSummarizeUsers:
    """Test per-user image counts."""

    def test_counts_and_order(self):
        """Test counts are attached and user order is kept."""
        users = [UserRecord(id="b", email="b@example.com"), UserRecord(id="a", email="a@example.com")]
        images = [make_image("1", "a"), make_image("2", "a"), make_image("3", "ghost")]

        summaries = summarize_users(users, images)

        assert [(s.user.id, s.image_count) for s in summaries] == [("b", 0), ("a", 2)]

    def test_empty(self):
        """Test no users give no summaries."""
        assert summarize_users([], [make_image("1", "a")]) == []


class TestRoleCounts:
    """Test role tallies."""

    def test_every_role_present(self):
        """Test roles without users are reported as zero."""
        users = [
            UserRecord(id="1", email="1@example.com", role="admin"),
            UserRecord(id="2", email="2@example.com"),
            UserRecord(id="3", email="3@example.com", role="user"),
        ]
        assert role_counts(users) == {UserRole.USER: 2, UserRole.MODERATOR: 0, UserRole.ADMIN: 1}

    def test_unknown_and_missing_roles(self):
        """Test a missing role counts as user and unknown roles are ignored."""
        users = [
            UserRecord(id="1", email="1@example.com", role=None),
            UserRecord(id="2", email="2@example.com", role="superuser"),
        ]
        assert role_counts(users) == {UserRole.USER: 1, UserRole.MODERATOR: 0, UserRole.ADMIN: 0}


class TestChangeUserRole:
    """Test the role-change pass-through."""

    def test_delegates_to_store(self):
        """Test a valid role is passed to the store verbatim."""
        repository = Mock()
        repository.update_user_role.return_value = True

        assert change_user_role(repository, "u1", "moderator") is True
        repository.update_user_role.assert_called_once_with("u1", "moderator")

    def test_store_failure_result_returned(self):
        """Test the store's failure flag is returned."""
        repository = Mock()
        repository.update_user_role.return_value = False
        assert change_user_role(repository, "missing", "admin") is False

    @pytest.mark.parametrize("role", ["owner", "ADMIN", ""])
    def test_unknown_role_rejected(self, role):
        """Test roles outside the enumeration never reach the store."""
        repository = Mock()
        with pytest.raises(ValueError, match="role must be one of"):
            change_user_role(repository, "u1", role)
        repository.update_user_role.assert_not_called()

"""
Unit tests for text, window and gallery filters.
"""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from imagegen_dashboard.core.filters import (
    count_unplaceable,
    filter_by_text,
    filter_by_window,
    filter_gallery,
    parse_time_range,
)
from imagegen_dashboard.storage.models import ImageRecord, UserRecord

NOW = datetime(2024, 1, 31, 12, 0, 0, tzinfo=timezone.utc)


def make_image(image_id: str, prompt: str = "a cat", created_at: str = "2024-01-30T10:00:00Z",
               size: str = "1024x1024", quality: str = "high", user_id: str = "u1") -> ImageRecord:
    """Create a test image record."""
    return ImageRecord(
        id=image_id,
        user_id=user_id,
        url=f"https://images.example.com/{image_id}.png",
        prompt=prompt,
        size=size,
        quality=quality,
        created_at=created_at
    )


class TestFilterByText:
    """Test case-insensitive text search."""

    def setup_method(self):
        """Set up test users."""
        self.users = [
            UserRecord(id="1", email="ada@example.com", display_name="Ada Lovelace"),
            UserRecord(id="2", email="grace@example.com", display_name=None),
            UserRecord(id="3", email="linus@kernel.org", display_name="Linus"),
        ]

    def test_empty_query_returns_everything(self):
        """Test empty query keeps content and order."""
        result = filter_by_text(self.users, "", ["email", "display_name"])
        assert result == self.users
        assert result is not self.users

    def test_case_insensitive_substring(self):
        """Test matching ignores case."""
        result = filter_by_text(self.users, "LOVE", ["email", "display_name"])
        assert [u.id for u in result] == ["1"]

    def test_any_field_matches(self):
        """Test a match in any designated field is enough."""
        result = filter_by_text(self.users, "example", ["email", "display_name"])
        assert [u.id for u in result] == ["1", "2"]

    def test_missing_field_never_matches(self):
        """Test None fields are skipped without error."""
        result = filter_by_text(self.users, "grace", ["display_name"])
        assert result == []

    def test_only_designated_fields_searched(self):
        """Test fields outside the list are ignored."""
        result = filter_by_text(self.users, "kernel", ["display_name"])
        assert result == []

    def test_works_on_mappings(self):
        """Test dict records are supported."""
        records = [{"prompt": "Red Fox"}, {"prompt": "blue whale"}, {"other": "fox"}]
        result = filter_by_text(records, "fox", ["prompt"])
        assert result == [{"prompt": "Red Fox"}]

    def test_preserves_order_and_input(self):
        """Test relative order is kept and the input is not modified."""
        records = [{"prompt": p} for p in ["cat 1", "dog", "cat 2", "Cat 3"]]
        snapshot = copy.deepcopy(records)
        result = filter_by_text(records, "cat", ["prompt"])
        assert [r["prompt"] for r in result] == ["cat 1", "cat 2", "Cat 3"]
        assert records == snapshot


class TestFilterByWindow:
    """Test time window filtering with an injected reference time."""

    def test_lower_bound_inclusive(self):
        """Test a record exactly at the window start is kept."""
        start = NOW - timedelta(days=7)
        inside = {"created_at": start.isoformat()}
        outside = {"created_at": (start - timedelta(seconds=1)).isoformat()}
        assert filter_by_window([inside, outside], 7, NOW) == [inside]

    def test_upper_bound_is_now(self):
        """Test records at now are kept and future records are not."""
        at_now = {"created_at": "2024-01-31T12:00:00Z"}
        future = {"created_at": "2024-01-31T12:00:01Z"}
        assert filter_by_window([at_now, future], 7, NOW) == [at_now]

    def test_unparseable_timestamps_skipped(self):
        """Test malformed timestamps are excluded without raising."""
        good = make_image("a", created_at="2024-01-30T10:00:00Z")
        bad = make_image("b", created_at="not-a-date")
        empty = make_image("c", created_at="")
        overflow = make_image("d", created_at="0001-01-01T00:00:00+01:00")
        assert filter_by_window([good, bad, empty, overflow], 30, NOW) == [good]

    def test_any_positive_window(self):
        """Test windows outside 7/30/90 are accepted."""
        records = [make_image(str(i), created_at=(NOW - timedelta(days=i)).isoformat()) for i in range(20)]
        assert len(filter_by_window(records, 3, NOW)) == 4
        assert len(filter_by_window(records, 365, NOW)) == 20

    def test_naive_now_taken_as_utc(self):
        """Test a naive reference time behaves like UTC."""
        records = [{"created_at": "2024-01-30T10:00:00Z"}]
        naive_now = datetime(2024, 1, 31, 12, 0, 0)
        assert filter_by_window(records, 7, naive_now) == records

    def test_custom_timestamp_field(self):
        """Test the timestamp field name is configurable."""
        records = [{"joined": "2024-01-30T10:00:00Z"}, {"joined": "2023-01-30T10:00:00Z"}]
        assert filter_by_window(records, 7, NOW, timestamp_field="joined") == records[:1]

    @pytest.mark.parametrize("window_days", [0, -1, True, 1.5])
    def test_invalid_window_raises(self, window_days):
        """Test non-positive or non-integer windows are rejected."""
        with pytest.raises(ValueError, match="window_days must be a positive integer"):
            filter_by_window([], window_days, NOW)

    def test_empty_input(self):
        """Test empty input gives empty output."""
        assert filter_by_window([], 7, NOW) == []


class TestFilterGallery:
    """Test the gallery's combined search and facets."""

    def setup_method(self):
        """Set up test images."""
        self.images = [
            make_image("1", prompt="A red fox", size="1024x1024", quality="high"),
            make_image("2", prompt="A blue fox", size="1792x1024", quality="low"),
            make_image("3", prompt="A green frog", size="1024x1024", quality="low"),
        ]

    def test_no_filters(self):
        """Test defaults keep every image."""
        assert filter_gallery(self.images) == self.images

    def test_all_matches_everything(self):
        """Test 'all' disables a facet."""
        assert filter_gallery(self.images, "", "all", "all") == self.images

    def test_search_and_facets_combined(self):
        """Test every condition must hold."""
        result = filter_gallery(self.images, "fox", size="1024x1024")
        assert [i.id for i in result] == ["1"]

    def test_quality_facet(self):
        """Test filtering by quality only."""
        result = filter_gallery(self.images, quality="low")
        assert [i.id for i in result] == ["2", "3"]


class TestCountUnplaceable:
    """Test counting of records that cannot be dated."""

    def test_counts_malformed_and_missing(self):
        """Test malformed and missing timestamps are both counted."""
        records = [
            {"created_at": "2024-01-01T00:00:00Z"},
            {"created_at": "garbage"},
            {"created_at": None},
            {},
            {"created_at": "0001-01-01T00:00:00+01:00"},
        ]
        assert count_unplaceable(records) == 4

    def test_empty(self):
        """Test empty input counts zero."""
        assert count_unplaceable([]) == 0


class TestParseTimeRange:
    """Test time range selector parsing."""

    @pytest.mark.parametrize("value, expected", [
        ("7d", 7), ("30d", 30), ("90d", 90), ("90D", 90), ("14", 14), (30, 30),
    ])
    def test_valid_ranges(self, value, expected):
        """Test accepted selectors."""
        assert parse_time_range(value) == expected

    @pytest.mark.parametrize("value", ["0d", "abc", "-7d", "7w", -1, 0])
    def test_invalid_ranges(self, value):
        """Test rejected selectors."""
        with pytest.raises(ValueError):
            parse_time_range(value)

    def test_bool_rejected(self):
        """Test booleans are not treated as day counts."""
        with pytest.raises(ValueError, match="Invalid time range"):
            parse_time_range(True)

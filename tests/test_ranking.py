"""
Unit tests for frequency ranking.
"""

import pytest

from imagegen_dashboard.core.ranking import FrequencyEntry, top_by_frequency, truncate_text


def by_prompt(record):
    return record["prompt"]


class TestTopByFrequency:
    """Test ranking by occurrence count."""

    def test_ordered_by_count(self):
        """Test the most frequent keys come first."""
        records = [{"prompt": p} for p in ["b", "a", "b", "c", "b", "a"]]
        result = top_by_frequency(records, by_prompt, 10)
        assert result == [
            FrequencyEntry("b", 3),
            FrequencyEntry("a", 2),
            FrequencyEntry("c", 1),
        ]

    def test_ties_keep_first_seen_order(self):
        """Test equal counts are ordered by first appearance."""
        records = [{"prompt": p} for p in ["z", "y", "x", "y", "z", "x"]]
        result = top_by_frequency(records, by_prompt, 10)
        assert [entry.key for entry in result] == ["z", "y", "x"]

    def test_limit_respected(self):
        """Test no more than limit entries are returned."""
        records = [{"prompt": str(i)} for i in range(25)]
        result = top_by_frequency(records, by_prompt, 10)
        assert len(result) == 10
        assert [entry.key for entry in result] == [str(i) for i in range(10)]

    def test_fewer_keys_than_limit(self):
        """Test fewer distinct keys give fewer entries."""
        records = [{"prompt": "only"}] * 4
        assert top_by_frequency(records, by_prompt, 10) == [FrequencyEntry("only", 4)]

    def test_counts_non_increasing(self):
        """Test counts never increase along the ranking."""
        records = [{"prompt": p} for p in "abacabadabacaba"]
        counts = [entry.count for entry in top_by_frequency(records, by_prompt, 3)]
        assert counts == sorted(counts, reverse=True)

    def test_truncation_groups_long_prompts(self):
        """Test prompts sharing the first characters group together."""
        base = "x" * 50
        records = [{"prompt": base + " one"}, {"prompt": base + " two"}, {"prompt": "short"}]
        result = top_by_frequency(records, by_prompt, 10, truncate_length=50)
        assert result == [FrequencyEntry(base + "...", 2), FrequencyEntry("short", 1)]

    def test_prompt_at_limit_not_marked(self):
        """Test a prompt exactly at the limit gets no ellipsis."""
        records = [{"prompt": "y" * 50}]
        result = top_by_frequency(records, by_prompt, 10, truncate_length=50)
        assert result[0].key == "y" * 50

    def test_none_keys_skipped(self):
        """Test records without a key are not counted."""
        records = [{"prompt": None}, {"prompt": "a"}]
        assert top_by_frequency(records, by_prompt, 10) == [FrequencyEntry("a", 1)]

    def test_non_string_keys_truncated_as_text(self):
        """Test numeric keys are converted before truncation."""
        records = [{"seed": 1234567}, {"seed": 1234599}]
        result = top_by_frequency(records, lambda r: r["seed"], 10, truncate_length=4)
        assert result == [FrequencyEntry("1234...", 2)]

    def test_zero_limit_and_empty_input(self):
        """Test degenerate inputs give empty results."""
        assert top_by_frequency([{"prompt": "a"}], by_prompt, 0) == []
        assert top_by_frequency([], by_prompt, 10) == []

    def test_negative_limit_raises(self):
        """Test negative limits are rejected."""
        with pytest.raises(ValueError, match="limit cannot be negative"):
            top_by_frequency([], by_prompt, -1)


class TestTruncateText:
    """Test text truncation."""

    def test_short_text_unchanged(self):
        """Test text within the limit is returned as is."""
        assert truncate_text("hello", 10) == "hello"

    def test_long_text_marked(self):
        """Test cut text ends with an ellipsis."""
        assert truncate_text("hello world", 5) == "hello..."

    def test_negative_length_raises(self):
        """Test negative lengths are rejected."""
        with pytest.raises(ValueError):
            truncate_text("hello", -1)

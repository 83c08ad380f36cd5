"""
Frequency ranking for popular prompts.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

ELLIPSIS = "..."


@dataclass(frozen=True)
class FrequencyEntry:
    """A grouping key and how many records produced it."""
    key: str
    count: int


def truncate_text(text: str, length: int) -> str:
    """Cut text to ``length`` characters, marking the cut with an ellipsis."""
    if length < 0:
        raise ValueError("length cannot be negative")
    if len(text) <= length:
        return text
    return text[:length] + ELLIPSIS


def top_by_frequency(
    records: Sequence[Any],
    key_fn: Callable[[Any], str],
    limit: int,
    truncate_length: Optional[int] = None
) -> List[FrequencyEntry]:
    """Rank grouping keys by how often they occur.

    Keys that tie on count keep the order in which they were first seen.
    Records whose key is None are not counted.

    Args:
        records: Records to group
        key_fn: Function producing the grouping key of a record
        limit: Maximum number of entries to return
        truncate_length: Optional maximum key length before grouping

    Returns:
        Up to ``limit`` entries ordered by count, highest first

    Raises:
        ValueError: If limit is negative
    """
    if limit < 0:
        raise ValueError("limit cannot be negative")

    counts: Dict[str, int] = {}
    for record in records:
        key = key_fn(record)
        if key is None:
            continue
        if truncate_length is not None:
            key = truncate_text(str(key), truncate_length)
        counts[key] = counts.get(key, 0) + 1

    # sorted() is stable, so dict insertion order breaks ties
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [FrequencyEntry(key=key, count=count) for key, count in ranked[:limit]]

"""
Ranking and deduplication of generated work items.

Items are ordered by priority tier (stable, so ties keep generator emission
order), near-duplicate titles are dropped, and the result is capped. The
output is priority-sorted, has no two items sharing a normalized title key,
and is idempotent: ranking an already-ranked list returns it unchanged.
"""

import re
from typing import Iterable, List, Optional, Set

from docket.contexts.classification.work_item import WorkItem

MAX_RANKED_ITEMS = 10
TITLE_KEY_LENGTH = 40

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]")


def normalized_title_key(title: str, key_length: int = TITLE_KEY_LENGTH) -> str:
    """
    Duplicate-detection key for a title.

    Example:
        >>> normalized_title_key("Build: Login Screen!")
        'buildloginscreen'
    """
    return _NON_ALPHANUMERIC.sub("", (title or "").lower())[:key_length]


def sort_by_priority(items: Iterable[WorkItem]) -> List[WorkItem]:
    """Stable sort by priority rank (Highest first)."""
    return sorted(items, key=lambda item: item.rank)


def dedupe_by_title(
    items: Iterable[WorkItem],
    seen_keys: Optional[Set[str]] = None,
    key_length: int = TITLE_KEY_LENGTH,
) -> List[WorkItem]:
    """
    Keep the first item for each normalized title key.

    Args:
        items: Items in the order that decides which duplicate survives
        seen_keys: Running set of keys already taken; updated in place.
            A fresh set is used when omitted.
        key_length: Key truncation length

    Returns:
        Items whose keys were not seen before
    """
    if seen_keys is None:
        seen_keys = set()

    kept = []
    for item in items:
        key = normalized_title_key(item.title, key_length)
        if key in seen_keys:
            continue
        seen_keys.add(key)
        kept.append(item)
    return kept


def rank_and_dedupe(
    items: Iterable[WorkItem],
    max_items: int = MAX_RANKED_ITEMS,
    key_length: int = TITLE_KEY_LENGTH,
) -> List[WorkItem]:
    """
    Sort items by priority, drop near-duplicates, and cap the result.

    Args:
        items: Raw items from the classifier
        max_items: Maximum number of items returned
        key_length: Normalized title key length used for duplicate detection

    Returns:
        At most max_items items, priority-sorted, with distinct title keys
    """
    ranked = sort_by_priority(items)
    unique = dedupe_by_title(ranked, seen_keys=set(), key_length=key_length)
    return unique[:max_items]

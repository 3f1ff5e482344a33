"""Unit tests for ranking and deduplication."""

import random

import pytest

from docket.contexts.classification.ranking import (
    MAX_RANKED_ITEMS,
    dedupe_by_title,
    normalized_title_key,
    rank_and_dedupe,
    sort_by_priority,
)
from docket.contexts.classification.work_item import PRIORITY_RANK, Priority, WorkItem

PRIORITIES = list(Priority)


def random_items(seed, count=30):
    rng = random.Random(seed)
    words = ["build", "login", "screen", "wallet", "sync", "export", "api", "model"]
    return [
        WorkItem(
            title=" ".join(rng.choice(words) for _ in range(rng.randint(1, 3))),
            priority=rng.choice(PRIORITIES),
        )
        for _ in range(count)
    ]


@pytest.mark.unit
def test_normalized_title_key():
    assert normalized_title_key("Build: Login Screen!") == "buildloginscreen"
    assert len(normalized_title_key("x" * 100)) == 40
    assert normalized_title_key("") == ""


@pytest.mark.unit
def test_sort_is_stable_within_priority():
    items = [
        WorkItem(title="m1", priority=Priority.MEDIUM),
        WorkItem(title="h1", priority=Priority.HIGH),
        WorkItem(title="m2", priority=Priority.MEDIUM),
        WorkItem(title="top", priority=Priority.HIGHEST),
        WorkItem(title="h2", priority=Priority.HIGH),
    ]

    assert [item.title for item in sort_by_priority(items)] == ["top", "h1", "h2", "m1", "m2"]


@pytest.mark.unit
def test_first_duplicate_in_ranked_order_survives():
    items = [
        WorkItem(title="Build login screen", priority=Priority.MEDIUM),
        WorkItem(title="Build: Login Screen!", priority=Priority.HIGH),
    ]

    ranked = rank_and_dedupe(items)

    assert len(ranked) == 1
    assert ranked[0].priority == Priority.HIGH


@pytest.mark.unit
def test_dedupe_uses_given_running_set():
    seen = {"buildloginscreen"}
    kept = dedupe_by_title([WorkItem(title="Build login screen"), WorkItem(title="Export")], seen_keys=seen)

    assert [item.title for item in kept] == ["Export"]
    assert seen == {"buildloginscreen", "export"}


@pytest.mark.unit
def test_result_capped():
    items = [WorkItem(title=f"Distinct item {i:02d}") for i in range(15)]
    assert len(rank_and_dedupe(items)) == MAX_RANKED_ITEMS


@pytest.mark.unit
def test_custom_cap():
    items = [WorkItem(title=f"Item {i}") for i in range(5)]
    assert len(rank_and_dedupe(items, max_items=3)) == 3


@pytest.mark.unit
@pytest.mark.parametrize("seed", range(10))
def test_ranking_invariants(seed):
    ranked = rank_and_dedupe(random_items(seed))

    ranks = [PRIORITY_RANK[item.priority] for item in ranked]
    keys = [normalized_title_key(item.title) for item in ranked]

    assert ranks == sorted(ranks)
    assert len(ranked) <= MAX_RANKED_ITEMS
    assert len(keys) == len(set(keys))


@pytest.mark.unit
@pytest.mark.parametrize("seed", range(10))
def test_ranking_is_idempotent(seed):
    once = rank_and_dedupe(random_items(seed))
    twice = rank_and_dedupe(once)

    assert [item.title for item in twice] == [item.title for item in once]

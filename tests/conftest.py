"""Shared fixtures: a controllable clock, fake tracker and cache stores."""

from typing import List, Set

import pytest

from docket.contexts.analysis.cache import AnalysisCache, InMemoryCacheStore
from docket.exceptions import TrackerError
from docket.integrations.protocols import CreatedItem, CreationRequest

START_MS = 1_700_000_000_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, start_ms: int = START_MS):
        self.now = start_ms

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeTracker:
    """Issue tracker that records requests and rejects chosen titles."""

    def __init__(self, project_key: str = "PAY"):
        self.project_key = project_key
        self.requests: List[CreationRequest] = []
        self.fail_titles: Set[str] = set()

    async def create_item(self, request: CreationRequest) -> CreatedItem:
        self.requests.append(request)
        if request.title in self.fail_titles:
            raise TrackerError(f"Rejected: {request.title}", status_code=400)
        key = f"{self.project_key}-{len(self.requests)}"
        return CreatedItem(external_id=key, self_link=f"https://tracker.test/issue/{key}")


class FailingStore:
    """Cache store whose every operation raises."""

    def __init__(self, error: Exception = None):
        self.error = error or OSError("disk unavailable")

    async def get(self, key):
        raise self.error

    async def set(self, key, entry):
        raise self.error

    async def delete(self, key):
        raise self.error


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryCacheStore()


@pytest.fixture
def analysis_cache(memory_store, clock):
    return AnalysisCache(memory_store, clock=clock)


@pytest.fixture
def fake_tracker():
    return FakeTracker()


@pytest.fixture
def failing_store():
    return FailingStore()

"""End-to-end tests for the backlog service with mocked Confluence and Jira."""

import json

import httpx
import pytest

from docket.contexts.analysis import BacklogService
from docket.contexts.analysis.cache import cache_key
from docket.exceptions import DocumentNotFoundError, ItemBatchFormatError, ValidationError
from docket.integrations.confluence import ConfluenceDocumentSource
from docket.integrations.jira import JiraIssueTracker

BASE_URL = "https://acme.atlassian.net"

PAGE_MARKUP = (
    "<h2>Data Model</h2><ul><li>id: string</li><li>balance: number</li></ul>"
    "<h2>Launch checklist</h2><ul><li>Publish release notes</li><li>Notify support</li></ul>"
)


class FakeAtlassian:
    """Mock Confluence and Jira endpoints sharing one request log."""

    def __init__(self, title="Payments MVP", page_status=200, rejected_titles=()):
        self.title = title
        self.page_status = page_status
        self.rejected_titles = set(rejected_titles)
        self.page_fetches = 0
        self.created = []

    def confluence(self, request: httpx.Request) -> httpx.Response:
        self.page_fetches += 1
        if self.page_status != 200:
            return httpx.Response(self.page_status, text="error")
        return httpx.Response(
            200, json={"id": "42", "title": self.title, "body": {"storage": {"value": PAGE_MARKUP}}}
        )

    def jira(self, request: httpx.Request) -> httpx.Response:
        fields = json.loads(request.content)["fields"]
        if fields["summary"] in self.rejected_titles:
            return httpx.Response(400, json={"errorMessages": ["Issue type is not valid"]})
        self.created.append(fields)
        key = f"PAY-{len(self.created)}"
        return httpx.Response(201, json={"id": str(len(self.created)), "key": key, "self": f"{BASE_URL}/{key}"})


@pytest.fixture
def atlassian():
    return FakeAtlassian()


@pytest.fixture
def service(atlassian, analysis_cache):
    source = ConfluenceDocumentSource(
        client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(atlassian.confluence))
    )
    tracker = JiraIssueTracker(
        client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(atlassian.jira))
    )
    return BacklogService(source, tracker, analysis_cache)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_analyze_then_served_from_cache(service, atlassian, clock):
    first = await service.analyze("42", "", "PAY")
    clock.advance(60_000)
    second = await service.analyze("42", "", "PAY")

    assert first.from_cache is False
    assert first.cache_age == "0s ago"
    assert first.result.items
    assert first.result.created_at_epoch_ms == clock() - 60_000
    assert second.from_cache is True
    assert second.cache_age == "1m ago"
    assert second.result == first.result
    assert atlassian.page_fetches == 1

    data = second.to_dict()
    assert data["fromCache"] is True
    assert data["documentTitle"] == "Payments MVP"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_force_refresh_refetches(service, atlassian):
    await service.analyze("42", "", "PAY")
    refreshed = await service.analyze("42", "", "PAY", force_refresh=True)

    assert refreshed.from_cache is False
    assert atlassian.page_fetches == 2


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetched_title_wins_over_supplied(service):
    response = await service.analyze("42", "Stale title", "PAY")
    assert response.result.document_title == "Payments MVP"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_supplied_title_used_when_page_has_none(service, atlassian):
    atlassian.title = ""
    response = await service.analyze("42", "Fallback title", "PAY")
    assert response.result.document_title == "Fallback title"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_and_clear_stored(service):
    assert (await service.get_stored("42", "PAY")).to_dict() == {"found": False}

    analysis = await service.analyze("42", "", "PAY")
    stored = await service.get_stored("42", "PAY")

    assert stored.found is True
    assert stored.data == analysis.result
    assert await service.clear_stored("42", "PAY") == {"success": True}
    assert (await service.get_stored("42", "PAY")).found is False


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_items_partial_failure_invalidates(service, atlassian, memory_store):
    analysis = await service.analyze("42", "", "PAY")
    items = [item.to_dict() for item in analysis.result.items]
    items.append({"title": "Rejected item", "description": "x", "issueType": "Task"})
    atlassian.rejected_titles = {"Rejected item"}

    outcome = await service.create_items("PAY", "42", "Payments MVP", items)

    assert len(outcome.created) == len(items) - 1
    assert len(outcome.errors) == 1
    assert outcome.errors[0].item.title == "Rejected item"
    assert outcome.errors[0].error_message == "Issue type is not valid"
    assert [fields["summary"] for fields in atlassian.created] == [item["title"] for item in items[:-1]]
    assert cache_key("42", "PAY") not in memory_store.entries


@pytest.mark.integration
@pytest.mark.asyncio
async def test_import_items_stored_without_fetch(service, atlassian):
    batch = json.dumps(
        {
            "summary": "Agent-generated backlog",
            "issues": [
                {"title": "Set up wallet service", "issueType": "Task", "priority": "Highest"},
                {"title": "Wallet balance screen", "issueType": "Story", "labels": ["ui"]},
            ],
        }
    )

    result = await service.import_items("42", "Payments MVP", "PAY", batch)
    stored = await service.get_stored("42", "PAY")

    assert result.summary == "Agent-generated backlog"
    assert [item.title for item in result.items] == ["Set up wallet service", "Wallet balance screen"]
    assert stored.data == result
    assert atlassian.page_fetches == 0

    served = await service.analyze("42", "", "PAY")
    assert served.from_cache is True
    assert served.result == result


@pytest.mark.integration
@pytest.mark.asyncio
async def test_import_items_rejects_bad_batch(service, memory_store):
    with pytest.raises(ItemBatchFormatError):
        await service.import_items("42", "Payments MVP", "PAY", "{bad json")
    assert memory_store.entries == {}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_missing_identifiers_rejected_before_fetch(service, atlassian):
    with pytest.raises(ValidationError, match="document ID"):
        await service.analyze("", "", "PAY")
    with pytest.raises(ValidationError, match="target project"):
        await service.analyze("42", "", " ")

    assert atlassian.page_fetches == 0


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_failure_propagates_and_caches_nothing(analysis_cache, memory_store):
    atlassian = FakeAtlassian(page_status=404)
    source = ConfluenceDocumentSource(
        client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(atlassian.confluence))
    )
    tracker = JiraIssueTracker(
        client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(atlassian.jira))
    )
    service = BacklogService(source, tracker, analysis_cache)

    with pytest.raises(DocumentNotFoundError):
        await service.analyze("42", "", "PAY")

    assert memory_store.entries == {}
    await service.aclose()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_garbled_jira_reply_fails_only_that_item(analysis_cache, memory_store):
    calls = []

    def jira(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 2:
            return httpx.Response(201, text="<html>Service unavailable</html>")
        return httpx.Response(201, json={"id": str(len(calls)), "key": f"PAY-{len(calls)}"})

    atlassian = FakeAtlassian()
    source = ConfluenceDocumentSource(
        client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(atlassian.confluence))
    )
    tracker = JiraIssueTracker(client=httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(jira)))
    service = BacklogService(source, tracker, analysis_cache)
    await service.import_items("42", "Payments MVP", "PAY", [{"title": "One"}, {"title": "Two"}, {"title": "Three"}])

    outcome = await service.create_items("PAY", "42", "Payments MVP", [{"title": "One"}, {"title": "Two"}, {"title": "Three"}])

    assert len(calls) == 3
    assert [record.external_id for record in outcome.created] == ["PAY-1", "PAY-3"]
    assert outcome.errors[0].item.title == "Two"
    assert cache_key("42", "PAY") not in memory_store.entries
    await service.aclose()

"""Integration tests for the Jira issue tracker over a mock transport."""

import json

import httpx
import pytest

from docket.exceptions import TrackerError
from docket.integrations.jira import JiraIssueTracker, build_issue_payload, to_adf
from docket.integrations.protocols import CreationRequest

BASE_URL = "https://acme.atlassian.net"


def make_request(**overrides):
    fields = dict(
        target_collection_id="PAY",
        title="Define Wallet data model",
        description_blocks=["## Description\nModel the wallet.\n\n## Acceptance Criteria\n- [ ] Done"],
        item_type="Story",
        labels=["payments", "data-model"],
        priority="High",
    )
    fields.update(overrides)
    return CreationRequest(**fields)


def make_tracker(handler, send_priority=False):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return JiraIssueTracker(client=client, send_priority=send_priority)


@pytest.mark.integration
def test_to_adf_one_paragraph_per_line():
    document = to_adf(["first\n\nsecond  \n", "third"])

    assert document["type"] == "doc"
    assert document["version"] == 1
    assert [p["content"][0]["text"] for p in document["content"]] == ["first", "second", "third"]


@pytest.mark.integration
def test_payload_omits_priority_by_default():
    fields = build_issue_payload(make_request())["fields"]

    assert fields["project"] == {"key": "PAY"}
    assert fields["summary"] == "Define Wallet data model"
    assert fields["issuetype"] == {"name": "Story"}
    assert fields["labels"] == ["payments", "data-model"]
    assert len(fields["description"]["content"]) == 4
    assert "priority" not in fields


@pytest.mark.integration
def test_payload_includes_priority_when_enabled():
    fields = build_issue_payload(make_request(), send_priority=True)["fields"]
    assert fields["priority"] == {"name": "High"}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_create_item_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json={"id": "10001", "key": "PAY-17", "self": f"{BASE_URL}/rest/api/3/issue/10001"})

    tracker = make_tracker(handler)
    created = await tracker.create_item(make_request())
    await tracker.aclose()

    assert created.external_id == "PAY-17"
    assert created.self_link.endswith("/10001")
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/rest/api/3/issue"
    assert json.loads(seen[0].content)["fields"]["summary"] == "Define Wallet data model"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_rejection_raises_tracker_error():
    def handler(request):
        return httpx.Response(400, json={"errorMessages": ["Bad"], "errors": {"summary": "required"}})

    with pytest.raises(TrackerError) as excinfo:
        await make_tracker(handler).create_item(make_request())

    assert excinfo.value.message == "Bad; summary: required"
    assert excinfo.value.status_code == 400


@pytest.mark.integration
@pytest.mark.asyncio
async def test_non_json_rejection_uses_body_text():
    with pytest.raises(TrackerError, match="gateway down"):
        await make_tracker(lambda request: httpx.Response(502, text="gateway down")).create_item(make_request())


@pytest.mark.integration
@pytest.mark.asyncio
async def test_transport_error_raises_tracker_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TrackerError, match="Could not reach Jira") as excinfo:
        await make_tracker(handler).create_item(make_request())

    assert excinfo.value.status_code is None


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["<html>proxy login</html>", '["PAY-1"]'])
async def test_unreadable_success_body_raises_tracker_error(body):
    tracker = make_tracker(lambda request: httpx.Response(201, text=body))

    with pytest.raises(TrackerError, match="Jira returned") as excinfo:
        await tracker.create_item(make_request())

    assert excinfo.value.status_code == 201


@pytest.mark.integration
@pytest.mark.asyncio
async def test_non_object_error_body_uses_text():
    tracker = make_tracker(lambda request: httpx.Response(400, text='["bad request"]'))

    with pytest.raises(TrackerError, match="bad request"):
        await tracker.create_item(make_request())

"""Integration tests for the Confluence document source over a mock transport."""

import httpx
import pytest

from docket.exceptions import DocumentFetchError, DocumentForbiddenError, DocumentNotFoundError
from docket.integrations.confluence import ConfluenceDocumentSource, extract_page_id

BASE_URL = "https://acme.atlassian.net"


def make_source(handler):
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return ConfluenceDocumentSource(client=client)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_document_success():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "id": 123,
                "title": "Payments MVP",
                "body": {"storage": {"value": "<h2>Data Model</h2>"}},
            },
        )

    source = make_source(handler)
    document = await source.fetch_document("123")
    await source.aclose()

    assert document.document_id == "123"
    assert document.title == "Payments MVP"
    assert document.markup_body == "<h2>Data Model</h2>"
    assert seen[0].url.path == "/wiki/api/v2/pages/123"
    assert seen[0].url.params["body-format"] == "storage"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_fetch_document_body_value_fallback():
    def handler(request):
        return httpx.Response(200, json={"title": "Spec", "body": {"value": "<p>Hi</p>"}})

    document = await make_source(handler).fetch_document("7")

    assert document.markup_body == "<p>Hi</p>"
    assert document.document_id == "7"


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, error_type",
    [
        (404, DocumentNotFoundError),
        (401, DocumentForbiddenError),
        (403, DocumentForbiddenError),
    ],
)
async def test_fetch_document_status_mapping(status, error_type):
    source = make_source(lambda request: httpx.Response(status, text="nope"))

    with pytest.raises(error_type) as excinfo:
        await source.fetch_document("123")

    assert excinfo.value.status_code == status
    assert excinfo.value.document_id == "123"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_server_error_is_generic_fetch_error():
    source = make_source(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(DocumentFetchError) as excinfo:
        await source.fetch_document("123")

    assert type(excinfo.value) is DocumentFetchError
    assert excinfo.value.status_code == 500


@pytest.mark.integration
@pytest.mark.asyncio
async def test_transport_error_is_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(DocumentFetchError, match="Could not reach Confluence"):
        await make_source(handler).fetch_document("123")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unreadable_body_is_fetch_error():
    source = make_source(lambda request: httpx.Response(200, text="<html>login</html>"))

    with pytest.raises(DocumentFetchError, match="unreadable"):
        await source.fetch_document("123")


@pytest.mark.integration
@pytest.mark.parametrize(
    "page_input, expected",
    [
        ("123456789", "123456789"),
        ("  42  ", "42"),
        ("https://acme.atlassian.net/wiki/spaces/ENG/pages/123456789/Payments-MVP", "123456789"),
        ("https://acme.atlassian.net/wiki/spaces/ENG/pages/987", "987"),
        ("https://acme.atlassian.net/wiki/spaces/ENG/overview", None),
        ("pages/123", None),
        ("", None),
    ],
)
def test_extract_page_id(page_input, expected):
    assert extract_page_id(page_input) == expected

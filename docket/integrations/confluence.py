"""
Confluence document source.

Fetches a page's title and storage-format body through the Confluence Cloud
REST API v2. Failures are mapped onto the fetch error taxonomy so callers can
show a distinct message for missing pages, permission problems, and
everything else. Nothing is retried.
"""

import re
from typing import Optional
from urllib.parse import urlparse

import httpx
from loguru import logger

from docket.exceptions import DocumentFetchError, DocumentForbiddenError, DocumentNotFoundError
from docket.integrations.protocols import SourceDocument

PAGE_PATH = "/wiki/api/v2/pages/{page_id}"

_DIGITS = re.compile(r"^\d+$")


def extract_page_id(page_input: str) -> Optional[str]:
    """
    Extract a numeric Confluence page ID from a raw ID or a page URL.

    Args:
        page_input: "123456789" or a URL like
            https://acme.atlassian.net/wiki/spaces/ENG/pages/123456789/Page-Title

    Returns:
        Page ID, or None if the input holds no numeric ID

    Example:
        >>> extract_page_id("https://acme.atlassian.net/wiki/spaces/ENG/pages/42/Spec")
        '42'
    """
    trimmed = (page_input or "").strip()
    if not trimmed:
        return None
    if _DIGITS.match(trimmed):
        return trimmed

    parsed = urlparse(trimmed)
    if not parsed.scheme or not parsed.netloc:
        return None

    numeric_parts = [part for part in parsed.path.split("/") if _DIGITS.match(part)]
    return numeric_parts[-1] if numeric_parts else None


class ConfluenceDocumentSource:
    """
    Document source backed by the Confluence Cloud REST API.

    Args:
        base_url: Site root, e.g. "https://acme.atlassian.net"
        email: Account e-mail for basic auth
        api_token: Atlassian API token
        timeout_s: Request timeout in seconds
        client: Pre-built AsyncClient (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        base_url: str = "",
        email: str = "",
        api_token: str = "",
        timeout_s: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if client is None:
            auth = httpx.BasicAuth(email, api_token) if email and api_token else None
            client = httpx.AsyncClient(base_url=base_url, auth=auth, timeout=timeout_s)
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def fetch_document(self, document_id: str) -> SourceDocument:
        """
        Fetch a page by ID.

        Args:
            document_id: Numeric page ID

        Returns:
            SourceDocument with title and storage-format body

        Raises:
            DocumentNotFoundError: 404 from Confluence
            DocumentForbiddenError: 401 or 403 from Confluence
            DocumentFetchError: Any other failure
        """
        try:
            response = await self._client.get(
                PAGE_PATH.format(page_id=document_id),
                params={"body-format": "storage"},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Confluence request failed for page {document_id}: {e}")
            raise DocumentFetchError(
                "Could not reach Confluence. Check your connection and try again.",
                document_id=document_id,
            ) from e

        if response.status_code == 404:
            raise DocumentNotFoundError(
                "Confluence page not found. Check the page URL or ID.",
                document_id=document_id,
                status_code=404,
            )
        if response.status_code in (401, 403):
            raise DocumentForbiddenError(
                "You don't have permission to view this Confluence page.",
                document_id=document_id,
                status_code=response.status_code,
            )
        if response.is_error:
            logger.error(
                f"Confluence fetch error for page {document_id}: "
                f"{response.status_code} {response.text[:200]}"
            )
            raise DocumentFetchError(
                "Failed to fetch Confluence page. Check URL/ID and permissions.",
                document_id=document_id,
                status_code=response.status_code,
            )

        try:
            page = response.json()
        except ValueError as e:
            raise DocumentFetchError(
                "Confluence returned an unreadable response.",
                document_id=document_id,
                status_code=response.status_code,
            ) from e

        body = page.get("body") or {}
        storage = body.get("storage") or {}
        markup_body = storage.get("value") or body.get("value") or ""

        return SourceDocument(
            document_id=str(document_id),
            title=page.get("title") or "",
            markup_body=markup_body,
        )

"""
Jira issue tracker.

Creates one issue per CreationRequest through the Jira Cloud REST API v3.
Descriptions are sent as Atlassian Document Format (ADF). Rejections and
transport failures both surface as TrackerError so the creation
orchestrator can record them per item.
"""

from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from docket.exceptions import TrackerError
from docket.integrations.protocols import CreatedItem, CreationRequest

ISSUE_PATH = "/rest/api/3/issue"


def to_adf(description_blocks: List[str]) -> Dict[str, Any]:
    """
    Convert description text blocks to an ADF document.

    Each non-empty line becomes its own paragraph, which keeps headings,
    bullets and checklist lines readable without a markdown renderer.

    Args:
        description_blocks: Plain/markdown-like text blocks

    Returns:
        ADF "doc" node
    """
    content = []
    for block in description_blocks:
        for line in (block or "").splitlines():
            line = line.rstrip()
            if not line:
                continue
            content.append({"type": "paragraph", "content": [{"type": "text", "text": line}]})

    return {"type": "doc", "version": 1, "content": content}


def build_issue_payload(request: CreationRequest, send_priority: bool = False) -> Dict[str, Any]:
    """Build the create-issue request body for a CreationRequest."""
    fields: Dict[str, Any] = {
        "project": {"key": request.target_collection_id},
        "summary": request.title,
        "description": to_adf(request.description_blocks),
        "issuetype": {"name": request.item_type},
        "labels": list(request.labels),
    }
    if send_priority and request.priority:
        fields["priority"] = {"name": request.priority}
    return {"fields": fields}


def _error_message(response: httpx.Response) -> str:
    """Flatten Jira's errorMessages/errors into one line."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"

    if not isinstance(data, dict):
        return response.text[:200] or f"HTTP {response.status_code}"

    messages = [str(m) for m in data.get("errorMessages") or []]
    errors = data.get("errors")
    for field_name, message in (errors.items() if isinstance(errors, dict) else []):
        messages.append(f"{field_name}: {message}")
    return "; ".join(messages) or f"HTTP {response.status_code}"


class JiraIssueTracker:
    """
    Issue tracker backed by the Jira Cloud REST API.

    Args:
        base_url: Site root, e.g. "https://acme.atlassian.net"
        email: Account e-mail for basic auth
        api_token: Atlassian API token
        timeout_s: Request timeout in seconds
        send_priority: Include the priority field (many project screens reject it)
        client: Pre-built AsyncClient (tests pass one with a MockTransport)
    """

    def __init__(
        self,
        base_url: str = "",
        email: str = "",
        api_token: str = "",
        timeout_s: float = 30.0,
        send_priority: bool = False,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if client is None:
            auth = httpx.BasicAuth(email, api_token) if email and api_token else None
            client = httpx.AsyncClient(base_url=base_url, auth=auth, timeout=timeout_s)
        self._client = client
        self.send_priority = send_priority

    async def aclose(self) -> None:
        await self._client.aclose()

    async def create_item(self, request: CreationRequest) -> CreatedItem:
        """
        Create one Jira issue.

        Raises:
            TrackerError: If Jira rejects the request or cannot be reached
        """
        payload = build_issue_payload(request, send_priority=self.send_priority)
        try:
            response = await self._client.post(
                ISSUE_PATH, json=payload, headers={"Accept": "application/json"}
            )
        except httpx.HTTPError as e:
            raise TrackerError(f"Could not reach Jira: {e}") from e

        if response.is_error:
            message = _error_message(response)
            logger.debug(f"Jira rejected '{request.title}': {response.status_code} {message}")
            raise TrackerError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise TrackerError(
                f"Jira returned an unreadable response ({response.status_code})",
                status_code=response.status_code,
            ) from e
        if not isinstance(data, dict):
            raise TrackerError(
                f"Jira returned an unexpected response ({response.status_code})",
                status_code=response.status_code,
            )
        return CreatedItem(external_id=data.get("key") or str(data.get("id", "")), self_link=data.get("self", ""))

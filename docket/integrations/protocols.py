"""
Interfaces for the external collaborators the pipeline depends on.

The core only needs three narrow capabilities: fetch a document, create a
tracker item, and a key-value store. Concrete adapters (Confluence, Jira,
in-memory or file stores) satisfy these structurally.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class SourceDocument:
    """Raw document as supplied by the document source."""

    document_id: str
    title: str
    markup_body: str


@dataclass(frozen=True)
class CreationRequest:
    """
    One item-creation request for the tracker.

    Attributes:
        target_collection_id: Project key the item is created in
        title: Summary, at most 255 characters
        description_blocks: Description text blocks (one block per item today)
        item_type: Tracker issue type name
        labels: De-duplicated, non-empty labels
        priority: Tracker priority name
    """

    target_collection_id: str
    title: str
    description_blocks: List[str] = field(default_factory=list)
    item_type: str = "Task"
    labels: List[str] = field(default_factory=list)
    priority: Optional[str] = None


@dataclass(frozen=True)
class CreatedItem:
    """Identifier of an item the tracker created."""

    external_id: str
    self_link: str = ""


class DocumentSource(Protocol):
    async def fetch_document(self, document_id: str) -> SourceDocument:
        """
        Fetch a document's title and markup.

        Raises:
            DocumentNotFoundError, DocumentForbiddenError, DocumentFetchError
        """
        ...


class IssueTracker(Protocol):
    async def create_item(self, request: CreationRequest) -> CreatedItem:
        """
        Create one item.

        Raises:
            TrackerError: On a rejected request or transport failure
        """
        ...


class CacheStore(Protocol):
    async def get(self, key: str) -> Optional[Dict[str, Any]]:
        ...

    async def set(self, key: str, entry: Dict[str, Any]) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...

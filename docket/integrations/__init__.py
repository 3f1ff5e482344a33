"""
Integrations

Adapters for the external collaborators: Confluence as the document source
and Jira as the issue tracker. The core depends only on the protocols.
"""

from docket.integrations.confluence import ConfluenceDocumentSource, extract_page_id
from docket.integrations.jira import JiraIssueTracker
from docket.integrations.protocols import (
    CacheStore,
    CreatedItem,
    CreationRequest,
    DocumentSource,
    IssueTracker,
    SourceDocument,
)

__all__ = [
    "ConfluenceDocumentSource",
    "JiraIssueTracker",
    "extract_page_id",
    "CacheStore",
    "CreatedItem",
    "CreationRequest",
    "DocumentSource",
    "IssueTracker",
    "SourceDocument",
]

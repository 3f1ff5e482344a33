"""Custom exceptions for the document-to-backlog pipeline."""

from typing import Optional


class DocketError(Exception):
    """Base class for all pipeline errors."""


class DocumentFetchError(DocketError):
    """
    Exception raised when the document source cannot supply a document.

    Attributes:
        message: User-facing error description
        document_id: Identifier of the requested document
        status_code: HTTP status returned by the source, if any
    """

    default_message = "Failed to fetch the document. Check the page ID and try again."

    def __init__(
        self,
        message: Optional[str] = None,
        document_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.document_id = document_id
        self.status_code = status_code

        parts = [self.message]
        if document_id:
            parts.append(f"Document: {document_id}")
        if status_code is not None:
            parts.append(f"Status: {status_code}")

        super().__init__("\n".join(parts))


class DocumentNotFoundError(DocumentFetchError):
    """The requested document does not exist."""

    default_message = "The document was not found. It may have been moved or deleted."


class DocumentForbiddenError(DocumentFetchError):
    """The caller is not allowed to read the requested document."""

    default_message = "You do not have permission to read this document."


class ValidationError(DocketError, ValueError):
    """
    Exception raised when a precondition fails before any external call.

    Raised for a missing target, an empty item list, items with empty titles,
    or a malformed externally supplied item batch.
    """


class ItemBatchFormatError(ValidationError):
    """An externally generated item batch could not be parsed."""


class TrackerError(DocketError):
    """
    Exception raised when the issue tracker rejects or fails a single creation.

    Attributes:
        message: Error description from the tracker or transport
        status_code: HTTP status returned by the tracker, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CacheStoreError(DocketError):
    """A cache store operation failed. Always treated as a soft failure."""

"""
Creation orchestrator.

Submits reviewed work items to the issue tracker one at a time, in input
order. Preconditions are checked for the whole batch before any request is
made; after that, a failing item is recorded and the loop moves on. When the
batch finishes the cached analysis for the source document is invalidated,
whether or not every item succeeded.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from docket.contexts.classification.work_item import MAX_TITLE_LENGTH, WorkItem, normalize_labels
from docket.contexts.creation.logger import (
    _log_info,
    log_creation_result,
    log_item_created,
    log_item_failed,
)
from docket.exceptions import TrackerError, ValidationError
from docket.integrations.protocols import CreationRequest, IssueTracker

if TYPE_CHECKING:
    from docket.contexts.analysis.cache import AnalysisCache


@dataclass(frozen=True)
class CreatedRecord:
    """An item the tracker accepted."""

    external_id: str
    title: str
    self_link: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"externalId": self.external_id, "title": self.title, "selfLink": self.self_link}


@dataclass(frozen=True)
class CreationFailure:
    """An item the tracker rejected, with the reason."""

    item: WorkItem
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"item": self.item.to_dict(), "errorMessage": self.error_message}


@dataclass
class CreationOutcome:
    """
    Per-item results of one creation batch.

    Attributes:
        created: Accepted items, in input order
        errors: Rejected items, in input order
    """

    created: List[CreatedRecord] = field(default_factory=list)
    errors: List[CreationFailure] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "created": [record.to_dict() for record in self.created],
            "errors": [failure.to_dict() for failure in self.errors],
        }


def validate_batch(items: Sequence[WorkItem], target_collection_id: str) -> None:
    """
    Check batch preconditions before any tracker call.

    Raises:
        ValidationError: Missing target, no items, or items with empty titles
    """
    if not (target_collection_id or "").strip():
        raise ValidationError("A target project is required to create items")
    if not items:
        raise ValidationError("No items to create")

    empty_titles = sum(1 for item in items if not (item.title or "").strip())
    if empty_titles:
        raise ValidationError(f"{empty_titles} item(s) have empty titles")


def build_creation_request(item: WorkItem, target_collection_id: str) -> CreationRequest:
    """Tracker request for one item: truncated title, flat labels, one description block."""
    return CreationRequest(
        target_collection_id=target_collection_id,
        title=item.title.strip()[:MAX_TITLE_LENGTH],
        description_blocks=[item.description or ""],
        item_type=item.item_type.value,
        labels=normalize_labels(item.labels),
        priority=item.priority.value,
    )


class CreationOrchestrator:
    """
    Sequential, partial-failure-tolerant item submission.

    Args:
        tracker: Issue tracker that creates one item per call
        cache: Analysis cache to invalidate after each batch (optional)
    """

    def __init__(self, tracker: IssueTracker, cache: Optional["AnalysisCache"] = None):
        self.tracker = tracker
        self.cache = cache

    async def submit(
        self,
        items: Sequence[WorkItem],
        target_collection_id: str,
        document_id: Optional[str] = None,
    ) -> CreationOutcome:
        """
        Create every item in order, collecting per-item failures.

        Args:
            items: Reviewed work items
            target_collection_id: Project key to create them in
            document_id: Source document; its cached analysis is invalidated afterward

        Returns:
            CreationOutcome with created records and per-item errors

        Raises:
            ValidationError: If a precondition fails (nothing is submitted)
        """
        validate_batch(items, target_collection_id)

        total = len(items)
        _log_info(f"Creating {total} items in {target_collection_id}")

        outcome = CreationOutcome()
        try:
            for index, item in enumerate(items, start=1):
                request = build_creation_request(item, target_collection_id)
                try:
                    created = await self.tracker.create_item(request)
                except TrackerError as e:
                    error_message = e.message
                except Exception as e:
                    # Unexpected adapter failures stay scoped to their item
                    error_message = f"{type(e).__name__}: {e}"
                else:
                    log_item_created(index, total, created.external_id, request.title)
                    outcome.created.append(
                        CreatedRecord(
                            external_id=created.external_id,
                            title=request.title,
                            self_link=created.self_link,
                        )
                    )
                    continue

                log_item_failed(index, total, request.title, error_message)
                outcome.errors.append(CreationFailure(item=item, error_message=error_message))
        finally:
            if self.cache is not None and document_id:
                await self.cache.invalidate(document_id, target_collection_id)

        log_creation_result(target_collection_id, len(outcome.created), len(outcome.errors))
        return outcome

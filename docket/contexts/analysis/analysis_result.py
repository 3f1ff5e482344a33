"""
Analysis result data structure.

An AnalysisResult is the immutable value produced by one successful
analysis. It is persisted verbatim (in its to_dict() form) into the cache
and handed to the review surface.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from docket.contexts.classification.section_patterns import (
    DOCUMENT_TYPE_NAMES,
    GENERAL_DOCUMENT_TYPE,
)
from docket.contexts.classification.work_item import (
    WorkItem,
    count_item_types,
    count_priorities,
)


@dataclass(frozen=True)
class AnalysisMeta:
    """
    Bookkeeping about how a result was produced.

    Attributes:
        sections_found: Number of sections the extractor returned
        raw_content_length: Length of the raw markup body
        item_type_counts: Items per issue type
        priority_counts: Items per priority
        document_type: Detected document type tag
        subject_name: Detected subject of the document
    """

    sections_found: int = 0
    raw_content_length: int = 0
    item_type_counts: Dict[str, int] = field(default_factory=dict)
    priority_counts: Dict[str, int] = field(default_factory=dict)
    document_type: str = GENERAL_DOCUMENT_TYPE
    subject_name: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sectionsFound": self.sections_found,
            "rawContentLength": self.raw_content_length,
            "itemTypeCounts": dict(self.item_type_counts),
            "priorityCounts": dict(self.priority_counts),
            "documentType": self.document_type,
            "subjectName": self.subject_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisMeta":
        return cls(
            sections_found=int(data.get("sectionsFound", 0)),
            raw_content_length=int(data.get("rawContentLength", 0)),
            item_type_counts=dict(data.get("itemTypeCounts") or {}),
            priority_counts=dict(data.get("priorityCounts") or {}),
            document_type=data.get("documentType") or GENERAL_DOCUMENT_TYPE,
            subject_name=data.get("subjectName") or "",
        )


@dataclass(frozen=True)
class AnalysisResult:
    """
    Ranked items plus summary for one analyzed document.

    Attributes:
        summary: One-paragraph description of what was found
        items: Ranked, deduplicated work items
        created_at_epoch_ms: When the analysis was computed
        document_title: Title of the analyzed document
        meta: Counts and detected document facts
    """

    summary: str
    items: Tuple[WorkItem, ...]
    created_at_epoch_ms: int
    document_title: str
    meta: AnalysisMeta = field(default_factory=AnalysisMeta)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "items": [item.to_dict() for item in self.items],
            "createdAtEpochMs": self.created_at_epoch_ms,
            "documentTitle": self.document_title,
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """
        Rebuild a result from its stored form.

        Raises:
            KeyError: If a required key is missing
            TypeError, ValueError, AttributeError: If a value has the wrong shape
        """
        return cls(
            summary=data["summary"],
            items=tuple(WorkItem.from_dict(item) for item in data["items"]),
            created_at_epoch_ms=int(data["createdAtEpochMs"]),
            document_title=data.get("documentTitle") or "",
            meta=AnalysisMeta.from_dict(data.get("meta") or {}),
        )


def build_summary(
    document_title: str,
    item_count: int,
    sections_found: int,
    document_type: str = GENERAL_DOCUMENT_TYPE,
) -> str:
    """
    Describe an analysis in one sentence.

    Example:
        >>> build_summary("Payments MVP", 3, 4, "mvp-scope")
        'Found 3 backlog items in 4 sections of the MVP scope document "Payments MVP".'
    """
    source_name = DOCUMENT_TYPE_NAMES.get(document_type, DOCUMENT_TYPE_NAMES[GENERAL_DOCUMENT_TYPE])
    item_noun = "item" if item_count == 1 else "items"
    section_noun = "section" if sections_found == 1 else "sections"
    title = f' "{document_title}"' if document_title else ""
    return (
        f"Found {item_count} backlog {item_noun} in {sections_found} {section_noun} "
        f"of the {source_name}{title}."
    )


def build_analysis_result(
    document_title: str,
    items: Iterable[WorkItem],
    created_at_epoch_ms: int,
    sections_found: int = 0,
    raw_content_length: int = 0,
    document_type: str = GENERAL_DOCUMENT_TYPE,
    subject_name: str = "",
    summary: Optional[str] = None,
) -> AnalysisResult:
    """
    Assemble an AnalysisResult, computing the meta counts from the items.

    Args:
        document_title: Title of the analyzed document
        items: Final (ranked) items
        created_at_epoch_ms: Analysis timestamp
        sections_found: Section count from the extractor
        raw_content_length: Raw markup length
        document_type: Detected document type tag
        subject_name: Detected subject
        summary: Explicit summary (built from the counts when omitted)

    Returns:
        Immutable AnalysisResult
    """
    items = tuple(items)
    if summary is None:
        summary = build_summary(document_title, len(items), sections_found, document_type)

    return AnalysisResult(
        summary=summary,
        items=items,
        created_at_epoch_ms=created_at_epoch_ms,
        document_title=document_title,
        meta=AnalysisMeta(
            sections_found=sections_found,
            raw_content_length=raw_content_length,
            item_type_counts=count_item_types(items),
            priority_counts=count_priorities(items),
            document_type=document_type,
            subject_name=subject_name,
        ),
    )

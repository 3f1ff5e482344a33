"""
Backlog service: the inbound surface of the pipeline.

Composes a document source, an issue tracker and the analysis cache, and
exposes the operations the review surface (or any automation caller) uses:
analyze, get_stored, clear_stored, create_items and import_items.

Usage:
    service = build_service(load_settings())
    response = await service.analyze("123456789", "", "PAY")
    outcome = await service.create_items("PAY", "123456789", "", response.result.items)
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from docket.contexts.analysis.analysis_result import AnalysisResult, build_analysis_result
from docket.contexts.analysis.cache import (
    DEFAULT_TTL_MS,
    AnalysisCache,
    InMemoryCacheStore,
    JsonFileCacheStore,
)
from docket.contexts.analysis.item_batch import normalize_item_batch
from docket.contexts.analysis.logger import _log_info, log_analysis_result, log_analysis_start
from docket.contexts.classification import build_generation_context, classify, rank_and_dedupe
from docket.contexts.classification.ranking import MAX_RANKED_ITEMS, TITLE_KEY_LENGTH
from docket.contexts.classification.section_patterns import extract_subject_name
from docket.contexts.classification.work_item import WorkItem
from docket.contexts.creation.orchestrator import CreationOrchestrator, CreationOutcome
from docket.contexts.intake import extract_sections
from docket.exceptions import ValidationError
from docket.integrations.confluence import ConfluenceDocumentSource
from docket.integrations.jira import JiraIssueTracker
from docket.integrations.protocols import DocumentSource, IssueTracker
from docket.utils.timestamp import now_ms


@dataclass(frozen=True)
class AnalysisResponse:
    """
    An analysis plus where it came from.

    Attributes:
        result: The analysis
        from_cache: True if served from the cache
        cache_age: Compact age of the cached entry (e.g., "5m ago")
    """

    result: AnalysisResult
    from_cache: bool
    cache_age: str

    def to_dict(self) -> Dict[str, Any]:
        return {**self.result.to_dict(), "fromCache": self.from_cache, "cacheAge": self.cache_age}


@dataclass(frozen=True)
class StoredAnalysis:
    """Lookup of a stored analysis without recomputation."""

    found: bool
    data: Optional[AnalysisResult] = None
    cache_age: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        if not self.found:
            return {"found": False}
        return {"found": True, "data": self.data.to_dict(), "cacheAge": self.cache_age}


def analyze_markup(
    document_title: str,
    markup_body: str,
    created_at_epoch_ms: int,
    target_collection_id: str = "",
    max_items: int = MAX_RANKED_ITEMS,
    key_length: int = TITLE_KEY_LENGTH,
) -> AnalysisResult:
    """
    Run extraction, classification and ranking over one markup body.

    Pure apart from logging; the caller supplies the timestamp.

    Args:
        document_title: Title of the document
        markup_body: Storage-format markup
        created_at_epoch_ms: Timestamp recorded on the result
        target_collection_id: Target project key (logging only)
        max_items: Ranking cap
        key_length: Duplicate-detection key length

    Returns:
        AnalysisResult with at most max_items items
    """
    document = extract_sections(markup_body, title=document_title)
    context = build_generation_context(document)
    raw_items = classify(document, target_collection_id, context=context)
    items = rank_and_dedupe(raw_items, max_items=max_items, key_length=key_length)

    result = build_analysis_result(
        document_title=document_title,
        items=items,
        created_at_epoch_ms=created_at_epoch_ms,
        sections_found=len(document.sections),
        raw_content_length=len(markup_body or ""),
        document_type=context.document_type,
        subject_name=context.subject_name,
    )
    log_analysis_result(document_title, len(result.items), result.meta.sections_found)
    return result


def _require(document_id: str, target_collection_id: str) -> None:
    if not str(document_id or "").strip():
        raise ValidationError("A document ID is required")
    if not str(target_collection_id or "").strip():
        raise ValidationError("A target project is required")


def _as_work_item(item: Union[WorkItem, Dict[str, Any]]) -> WorkItem:
    if isinstance(item, WorkItem):
        return item
    if isinstance(item, dict):
        return WorkItem.from_dict(item)
    raise ValidationError(f"Unsupported item type: {type(item).__name__}")


class BacklogService:
    """
    Document-to-backlog operations over injected collaborators.

    Args:
        source: Document source (e.g., Confluence)
        tracker: Issue tracker (e.g., Jira)
        cache: Analysis cache
        max_items: Ranking cap
        key_length: Duplicate-detection key length
    """

    def __init__(
        self,
        source: DocumentSource,
        tracker: IssueTracker,
        cache: AnalysisCache,
        max_items: int = MAX_RANKED_ITEMS,
        key_length: int = TITLE_KEY_LENGTH,
    ):
        self.source = source
        self.tracker = tracker
        self.cache = cache
        self.max_items = max_items
        self.key_length = key_length
        self.orchestrator = CreationOrchestrator(tracker, cache)

    async def aclose(self) -> None:
        """Close adapter HTTP clients (adapters without one are skipped)."""
        for adapter in (self.source, self.tracker):
            close = getattr(adapter, "aclose", None)
            if close is not None:
                await close()

    async def analyze(
        self,
        document_id: str,
        document_title: str,
        target_collection_id: str,
        force_refresh: bool = False,
    ) -> AnalysisResponse:
        """
        Analyze a document, serving a fresh cached result when one exists.

        Args:
            document_id: Source document ID
            document_title: Fallback title if the source returns none
            target_collection_id: Target project key
            force_refresh: Invalidate the cached entry and recompute

        Returns:
            AnalysisResponse

        Raises:
            ValidationError: Missing document ID or target
            DocumentFetchError: (or a subclass) if the fetch fails
        """
        _require(document_id, target_collection_id)
        log_analysis_start(document_id, target_collection_id, force_refresh)

        if force_refresh:
            await self.cache.invalidate(document_id, target_collection_id)

        async def run_analysis() -> AnalysisResult:
            source_document = await self.source.fetch_document(document_id)
            return analyze_markup(
                document_title=source_document.title or document_title or "",
                markup_body=source_document.markup_body,
                created_at_epoch_ms=self.cache.clock(),
                target_collection_id=target_collection_id,
                max_items=self.max_items,
                key_length=self.key_length,
            )

        cached = await self.cache.get_or_analyze(document_id, target_collection_id, run_analysis)
        return AnalysisResponse(
            result=cached.result, from_cache=cached.from_cache, cache_age=cached.cache_age
        )

    async def get_stored(self, document_id: str, target_collection_id: str) -> StoredAnalysis:
        """Stored analysis for a document/target pair, if still fresh."""
        _require(document_id, target_collection_id)
        cached = await self.cache.get_stored(document_id, target_collection_id)
        if cached is None:
            return StoredAnalysis(found=False)
        return StoredAnalysis(found=True, data=cached.result, cache_age=cached.cache_age)

    async def clear_stored(self, document_id: str, target_collection_id: str) -> Dict[str, bool]:
        """Drop the stored analysis for a document/target pair."""
        _require(document_id, target_collection_id)
        success = await self.cache.invalidate(document_id, target_collection_id)
        return {"success": success}

    async def create_items(
        self,
        target_collection_id: str,
        document_id: str,
        document_title: str,
        items: Iterable[Union[WorkItem, Dict[str, Any]]],
    ) -> CreationOutcome:
        """
        Create reviewed items in the tracker.

        Args:
            target_collection_id: Target project key
            document_id: Source document (its cached analysis is invalidated)
            document_title: Source document title (logging only)
            items: WorkItems or their wire dicts

        Returns:
            CreationOutcome with per-item successes and failures

        Raises:
            ValidationError: If a batch precondition fails
        """
        work_items = [_as_work_item(item) for item in (items or [])]
        title = f' from "{document_title}"' if document_title else ""
        _log_info(f"Submitting {len(work_items)} items{title}")
        return await self.orchestrator.submit(work_items, target_collection_id, document_id=document_id)

    async def import_items(
        self,
        document_id: str,
        document_title: str,
        target_collection_id: str,
        payload: Any,
    ) -> AnalysisResult:
        """
        Store an externally generated item batch as the document's analysis.

        The batch skips the classifier and ranking; it keeps its own order
        and is only capped at max_items.

        Raises:
            ValidationError: Missing document ID or target
            ItemBatchFormatError: Malformed batch
        """
        _require(document_id, target_collection_id)
        batch = normalize_item_batch(payload)
        items = batch.items[: self.max_items]

        raw_length = len(payload) if isinstance(payload, (str, bytes)) else len(json.dumps(payload))
        result = build_analysis_result(
            document_title=document_title or "",
            items=items,
            created_at_epoch_ms=self.cache.clock(),
            raw_content_length=raw_length,
            subject_name=extract_subject_name(document_title or ""),
            summary=batch.summary or f"Imported {len(items)} backlog items from an external batch.",
        )
        await self.cache.put(document_id, target_collection_id, result)
        _log_info(f"Imported {len(items)} items for page {document_id}")
        return result


def build_cache(settings: Dict[str, Any], in_memory: bool = False) -> AnalysisCache:
    """Analysis cache from resolved settings (JSON file store unless in_memory)."""
    cache_settings = settings["cache"]
    store = InMemoryCacheStore() if in_memory else JsonFileCacheStore(Path(cache_settings["path"]))
    return AnalysisCache(store, ttl_ms=int(cache_settings.get("ttl_ms", DEFAULT_TTL_MS)), clock=now_ms)


def build_service(settings: Dict[str, Any], in_memory_cache: bool = False) -> BacklogService:
    """
    Wire a BacklogService from resolved settings.

    Args:
        settings: Output of docket.config.load_settings()
        in_memory_cache: Use a process-local store instead of the JSON file

    Returns:
        BacklogService backed by Confluence, Jira and the configured cache
    """
    atlassian = settings["atlassian"]
    cache = build_cache(settings, in_memory=in_memory_cache)

    source = ConfluenceDocumentSource(
        base_url=atlassian["base_url"],
        email=atlassian["email"],
        api_token=atlassian["api_token"],
        timeout_s=float(atlassian.get("timeout_s", 30.0)),
    )
    tracker = JiraIssueTracker(
        base_url=atlassian["base_url"],
        email=atlassian["email"],
        api_token=atlassian["api_token"],
        timeout_s=float(atlassian.get("timeout_s", 30.0)),
        send_priority=bool(settings.get("jira", {}).get("send_priority", False)),
    )
    ranking = settings.get("ranking", {})
    return BacklogService(
        source,
        tracker,
        cache,
        max_items=int(ranking.get("max_items", MAX_RANKED_ITEMS)),
        key_length=int(ranking.get("key_length", TITLE_KEY_LENGTH)),
    )

"""
Analysis Context

Responsibilities:
- Runs extraction, classification and ranking for one document
- Caches results per document/target pair with a fixed TTL
- Accepts externally generated item batches as stored analyses
- Exposes the inbound operations through BacklogService

Owns: AnalysisResult, cache entries and stores, BacklogService
Never: Talks to the tracker directly (creation goes through the orchestrator)
"""

from docket.contexts.analysis.analysis_result import (
    AnalysisMeta,
    AnalysisResult,
    build_analysis_result,
)
from docket.contexts.analysis.cache import (
    AnalysisCache,
    CachedAnalysis,
    CacheEntry,
    InMemoryCacheStore,
    JsonFileCacheStore,
    cache_key,
)
from docket.contexts.analysis.item_batch import ItemBatch, normalize_item_batch
from docket.contexts.analysis.service import (
    AnalysisResponse,
    BacklogService,
    StoredAnalysis,
    analyze_markup,
    build_cache,
    build_service,
)

__all__ = [
    # Results
    "AnalysisResult",
    "AnalysisMeta",
    "build_analysis_result",
    # Cache
    "AnalysisCache",
    "CachedAnalysis",
    "CacheEntry",
    "InMemoryCacheStore",
    "JsonFileCacheStore",
    "cache_key",
    # Item batches
    "ItemBatch",
    "normalize_item_batch",
    # Service
    "BacklogService",
    "AnalysisResponse",
    "StoredAnalysis",
    "analyze_markup",
    "build_cache",
    "build_service",
]

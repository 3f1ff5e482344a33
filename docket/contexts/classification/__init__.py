"""
Classification Context

Responsibilities:
- Detects document type and subject name
- Dispatches sections to item generators through an ordered rule table
- Renders item descriptions from templates
- Ranks and deduplicates the generated items

Owns: WorkItem model, keyword rules, generators, ranking
Never: Talks to the document source, the cache or the tracker
"""

from docket.contexts.classification.classifier import (
    DISPATCH_RULES,
    build_generation_context,
    classify,
    select_rule,
)
from docket.contexts.classification.ranking import normalized_title_key, rank_and_dedupe
from docket.contexts.classification.work_item import ItemType, Priority, WorkItem

__all__ = [
    # Classification
    "classify",
    "select_rule",
    "build_generation_context",
    "DISPATCH_RULES",
    # Ranking
    "rank_and_dedupe",
    "normalized_title_key",
    # Data structures
    "WorkItem",
    "ItemType",
    "Priority",
]

"""
Normalization of externally generated item batches.

An item batch is a pre-classified list of items produced outside the
pipeline (for example by a generation agent). It arrives as a JSON string,
a list of item objects, or an object wrapping the list, and is coerced into
WorkItems so it can be stored as an analysis without running the classifier.

Type and priority coercion are loose substring heuristics:
"Highlander" coerces to High, "Sub-task" coerces to Task.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from docket.contexts.analysis.logger import _log_info, _log_warning
from docket.contexts.classification.work_item import (
    MAX_TITLE_LENGTH,
    ItemType,
    Priority,
    WorkItem,
    normalize_labels,
)
from docket.exceptions import ItemBatchFormatError

# Keys that may wrap the item list in an object payload
BATCH_LIST_KEYS = ("issues", "items")

# Checked in order, first substring match wins
ITEM_TYPE_KEYWORDS = (
    ("bug", ItemType.BUG),
    ("epic", ItemType.EPIC),
    ("task", ItemType.TASK),
    ("story", ItemType.STORY),
)

ACCEPTANCE_HEADING = "## Acceptance Criteria"


@dataclass(frozen=True)
class ItemBatch:
    """
    Normalized item batch.

    Attributes:
        items: Items with non-empty titles, in input order
        summary: Batch summary, if the payload carried one
        dropped: Number of entries dropped for having no title
    """

    items: List[WorkItem]
    summary: Optional[str] = None
    dropped: int = 0


def coerce_item_type(raw: Any) -> ItemType:
    """
    Coerce a free-form issue type into one of Bug, Epic, Task or Story.

    Example:
        >>> coerce_item_type("Sub-task")
        <ItemType.TASK: 'Task'>
    """
    value = str(raw or "").lower()
    for keyword, item_type in ITEM_TYPE_KEYWORDS:
        if keyword in value:
            return item_type
    return ItemType.TASK


def coerce_priority(raw: Any) -> Priority:
    """
    Coerce a free-form priority by substring.

    Contains "high": Highest if it ends in "est", else High.
    Contains "low": Lowest if it ends in "est", else Low.
    Anything else: Medium.
    """
    value = str(raw or "").strip().lower()
    if "high" in value:
        return Priority.HIGHEST if value.endswith("est") else Priority.HIGH
    if "low" in value:
        return Priority.LOWEST if value.endswith("est") else Priority.LOW
    return Priority.MEDIUM


def _append_acceptance_criteria(description: str, criteria: Any) -> str:
    if not isinstance(criteria, list):
        return description
    lines = [str(c).strip() for c in criteria if str(c).strip()]
    if not lines or "acceptance criteria" in description.lower():
        return description

    checklist = "\n".join(f"- [ ] {line}" for line in lines)
    block = f"{ACCEPTANCE_HEADING}\n{checklist}"
    return f"{description.rstrip()}\n\n{block}" if description.strip() else block


def _load_payload(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ItemBatchFormatError(f"Item batch is not valid UTF-8: {e.reason} at byte {e.start}") from e
    if isinstance(payload, str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            raise ItemBatchFormatError(f"Item batch is not valid JSON: {e.msg} (line {e.lineno})") from e
    return payload


def _item_from_entry(entry: Dict[str, Any]) -> WorkItem:
    title = str(entry.get("title") or entry.get("summary") or "").strip()[:MAX_TITLE_LENGTH]
    description = str(entry.get("description") or "")
    description = _append_acceptance_criteria(description, entry.get("acceptanceCriteria"))
    raw_type = entry.get("issueType") or entry.get("type") or entry.get("itemType")

    return WorkItem(
        title=title,
        description=description,
        item_type=coerce_item_type(raw_type),
        labels=normalize_labels(entry.get("labels")),
        priority=coerce_priority(entry.get("priority")),
    )


def normalize_item_batch(payload: Any) -> ItemBatch:
    """
    Parse and normalize an external item batch.

    Args:
        payload: JSON string, list of item objects, or an object with an
            "issues" (or "items") list and an optional "summary"

    Returns:
        ItemBatch with at least one item

    Raises:
        ItemBatchFormatError: Malformed JSON or UTF-8, no item list, non-object
            entries, labels that are not a string or list, or no entry with a title
    """
    data = _load_payload(payload)

    summary = None
    if isinstance(data, dict):
        summary = data.get("summary") if isinstance(data.get("summary"), str) else None
        entries = next((data[key] for key in BATCH_LIST_KEYS if key in data), None)
    else:
        entries = data

    if not isinstance(entries, list):
        raise ItemBatchFormatError(
            'Item batch must be a list of items or an object with an "issues" list'
        )

    items = []
    dropped = 0
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ItemBatchFormatError(
                f"Item batch entry {index + 1} is {type(entry).__name__}, expected an object"
            )
        labels = entry.get("labels")
        if labels is not None and not isinstance(labels, (str, list)):
            raise ItemBatchFormatError(
                f"Item batch entry {index + 1} has labels of type {type(labels).__name__}, "
                "expected a string or a list"
            )
        item = _item_from_entry(entry)
        if not item.title:
            _log_warning(f"Dropping item batch entry {index + 1}: no title")
            dropped += 1
            continue
        items.append(item)

    if not items:
        raise ItemBatchFormatError("Item batch contains no items with a title")

    _log_info(f"Normalized item batch: {len(items)} items ({dropped} dropped)")
    return ItemBatch(items=items, summary=summary, dropped=dropped)

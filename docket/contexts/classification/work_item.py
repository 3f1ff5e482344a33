"""
Work item data structure for the Classification context.

A WorkItem is a single generated unit of work destined for the tracker.
Generators create them; a human reviewer may edit them before submission;
the pipeline never mutates them after generation.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Union

MAX_TITLE_LENGTH = 255


class ItemType(str, Enum):
    """Tracker issue types, valued by their tracker-facing names."""

    STORY = "Story"
    TASK = "Task"
    BUG = "Bug"
    EPIC = "Epic"
    SUB_TASK = "Sub-task"


class Priority(str, Enum):
    """Tracker priorities, valued by their tracker-facing names."""

    HIGHEST = "Highest"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    LOWEST = "Lowest"


# Fixed rank used for ordering: lower rank sorts first
PRIORITY_RANK = {
    Priority.HIGHEST: 0,
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
    Priority.LOWEST: 4,
}


def normalize_label(label: str) -> str:
    """
    Normalize a label for the tracker.

    Lower-cases, trims, and replaces internal whitespace with hyphens
    (Jira labels cannot contain spaces).
    """
    return re.sub(r"\s+", "-", str(label).strip().lower())


def normalize_labels(labels: Union[str, Iterable[Any], None]) -> List[str]:
    """
    Flatten labels into an ordered, de-duplicated list of non-empty strings.

    Accepts a comma-separated string, a list of strings, or nested lists
    (as produced by hand-edited payloads).

    Args:
        labels: Raw labels in any of the accepted shapes

    Returns:
        Normalized labels, first occurrence wins

    Example:
        >>> normalize_labels(["API", "data model", ["api", ""]])
        ['api', 'data-model']
    """
    if labels is None:
        return []
    if isinstance(labels, str):
        raw = labels.split(",")
    else:
        raw = []
        for label in labels:
            if isinstance(label, (list, tuple, set)):
                raw.extend(normalize_labels(label))
            elif label is not None:
                raw.append(label)

    normalized = []
    for label in raw:
        label = normalize_label(label)
        if label and label not in normalized:
            normalized.append(label)
    return normalized


@dataclass
class WorkItem:
    """
    Generated backlog item.

    Attributes:
        title: Item summary, at most 255 characters
        description: Markdown-like text with a Description block and an
            Acceptance Criteria checklist block
        item_type: Tracker issue type
        labels: Ordered set of lowercase-normalized labels
        priority: Tracker priority
    """

    title: str
    description: str = ""
    item_type: ItemType = ItemType.STORY
    labels: List[str] = field(default_factory=list)
    priority: Priority = Priority.MEDIUM

    def __post_init__(self):
        self.title = (self.title or "")[:MAX_TITLE_LENGTH]
        self.item_type = ItemType(self.item_type)
        self.priority = Priority(self.priority)
        self.labels = normalize_labels(self.labels)

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.priority]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the wire keys shared with the review UI."""
        return {
            "title": self.title,
            "description": self.description,
            "issueType": self.item_type.value,
            "labels": list(self.labels),
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkItem":
        """
        Build a WorkItem from its wire form.

        Unknown issue types and priorities fall back to Task and Medium,
        matching the defaults the review UI shows for missing values.
        """
        item_type = _wire_value(data.get("issueType", data.get("item_type")))
        priority = _wire_value(data.get("priority"))
        return cls(
            title=data.get("title") or "",
            description=data.get("description") or "",
            item_type=item_type if item_type in _ITEM_TYPE_VALUES else ItemType.TASK,
            labels=data.get("labels") or [],
            priority=priority if priority in _PRIORITY_VALUES else Priority.MEDIUM,
        )


_ITEM_TYPE_VALUES = {t.value for t in ItemType}
_PRIORITY_VALUES = {p.value for p in Priority}


def _wire_value(value: Any) -> str:
    """Tracker-facing string for an enum member or raw string."""
    if isinstance(value, Enum):
        return value.value
    return value if isinstance(value, str) else ""


def count_item_types(items: Iterable[WorkItem]) -> Dict[str, int]:
    """Count items per issue type, keyed by tracker-facing name."""
    return dict(Counter(item.item_type.value for item in items))


def count_priorities(items: Iterable[WorkItem]) -> Dict[str, int]:
    """Count items per priority, keyed by tracker-facing name."""
    return dict(Counter(item.priority.value for item in items))

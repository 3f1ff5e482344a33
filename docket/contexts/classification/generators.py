"""
Item generators for the Classification context.

Each generator turns one classified section into zero or more WorkItems.
Generators are plain functions with the same signature so the classifier
can hold them in an ordered dispatch table:

    generator(section: Section, context: GenerationContext) -> list[WorkItem]

Descriptions are rendered through description_templates.render_description,
never assembled inline.
"""

from dataclasses import dataclass
from typing import Callable, List

from docket.contexts.classification.description_templates import (
    DescriptionContext,
    render_description,
)
from docket.contexts.classification.section_patterns import (
    DOCUMENT_TYPE_NAMES,
    GENERAL_DOCUMENT_TYPE,
    subject_label,
)
from docket.contexts.classification.titles import clean_bullet_text, make_item_title
from docket.contexts.classification.work_item import ItemType, Priority, WorkItem
from docket.contexts.intake.document_structure import Section

# Item count limits per generator
MAX_FEATURE_ITEMS = 5
MAX_REQUIREMENT_ITEMS = 5
MAX_FUTURE_ITEMS = 3

# UI sections with more qualifying bullets than this get one grouped item
UI_GROUPING_THRESHOLD = 3
MIN_UI_BULLET_LENGTH = 3

# Feature bullets shorter than this are too vague to become items
MIN_FEATURE_BULLET_LENGTH = 15

# Generic bullet groups need this many bullets and a title at least this long
MIN_GENERIC_BULLETS = 2
MIN_GENERIC_TITLE_LENGTH = 3

# Detail bullets listed in a single description
MAX_DETAILS = 12

FALLBACK_PREVIEW_LENGTH = 500


@dataclass(frozen=True)
class GenerationContext:
    """
    Document-level facts shared by every generator.

    Attributes:
        document_title: Title of the page being analyzed
        document_type: Detected document type tag (e.g., "mvp-scope")
        subject_name: Product or project the page is about
    """

    document_title: str
    document_type: str = GENERAL_DOCUMENT_TYPE
    subject_name: str = "Project"

    @property
    def source_name(self) -> str:
        return DOCUMENT_TYPE_NAMES.get(self.document_type, DOCUMENT_TYPE_NAMES[GENERAL_DOCUMENT_TYPE])

    @property
    def subject_label(self) -> str:
        return subject_label(self.subject_name)

    def labels(self, *topic_labels: str) -> List[str]:
        """Topic labels plus the subject label and (non-general) document type."""
        labels = list(topic_labels)
        if self.subject_label:
            labels.append(self.subject_label)
        if self.document_type != GENERAL_DOCUMENT_TYPE:
            labels.append(self.document_type)
        return labels

    def describe(self, section: Section, summary: str, criteria: List[str], **kwargs) -> str:
        """Render a description for an item generated from section."""
        return render_description(
            DescriptionContext(
                summary=summary,
                criteria=criteria,
                document_title=self.document_title,
                source_name=self.source_name,
                section_title=section.title,
                **kwargs,
            )
        )


Generator = Callable[[Section, GenerationContext], List[WorkItem]]

# =============================================================================
# HELPERS
# =============================================================================


def _clean_bullets(section: Section, min_length: int = 1) -> List[str]:
    """Cleaned bullet texts at least min_length characters long."""
    cleaned = (clean_bullet_text(b) for b in section.bullets)
    return [b for b in cleaned if len(b) >= min_length]


def _row_details(section: Section) -> List[str]:
    """Render table rows as detail lines ("id | string | required")."""
    return [" | ".join(cell for cell in row if cell) for row in section.table_rows if any(row)]


def _code_notes(section: Section) -> List[str]:
    count = len(section.code_blocks)
    if not count:
        return []
    noun = "sample" if count == 1 else "samples"
    return [f"The section includes {count} code {noun}; use {'it' if count == 1 else 'them'} as the reference."]


# =============================================================================
# GENERATORS
# =============================================================================


def generate_setup_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """One High-priority task to scaffold the project structure and tooling."""
    details = (_clean_bullets(section) + _row_details(section))[:MAX_DETAILS]
    description = context.describe(
        section,
        summary=(
            f"Set up the {context.subject_name} repository structure and development "
            f"tooling described in \"{section.title}\"."
        ),
        details=details,
        notes=_code_notes(section),
        criteria=[
            "Folder layout matches the structure described in the document",
            "Build, lint and test tooling run locally and in CI",
            "Setup steps are documented in the README",
        ],
    )
    return [
        WorkItem(
            title=f"Set up {context.subject_name} project structure and tooling",
            description=description,
            item_type=ItemType.TASK,
            labels=context.labels("setup", "infrastructure"),
            priority=Priority.HIGH,
        )
    ]


def generate_data_model_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """One High-priority story covering the data model and its persistence."""
    details = (_clean_bullets(section) + _row_details(section))[:MAX_DETAILS]
    description = context.describe(
        section,
        summary=(
            f"Define the {context.subject_name} data model and the persistence layer "
            f"that stores it, as described in \"{section.title}\"."
        ),
        details=details,
        notes=_code_notes(section),
        criteria=[
            "Every entity and field listed in the document is represented in the schema",
            "Records can be created, read, updated and deleted through the persistence layer",
            "Required fields and types are validated before writes",
            "Schema changes are applied through versioned migrations",
        ],
    )
    return [
        WorkItem(
            title=f"Define {context.subject_name} data model and persistence",
            description=description,
            item_type=ItemType.STORY,
            labels=context.labels("data-model", "backend"),
            priority=Priority.HIGH,
        )
    ]


def generate_ui_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """
    UI component items.

    More than three qualifying bullets collapse into one grouped High story;
    otherwise each bullet becomes its own Medium story.
    """
    bullets = _clean_bullets(section, MIN_UI_BULLET_LENGTH)
    labels = context.labels("ui", "frontend")

    if len(bullets) > UI_GROUPING_THRESHOLD:
        description = context.describe(
            section,
            summary=f"Build the {context.subject_name} UI components listed in \"{section.title}\".",
            details=bullets[:MAX_DETAILS],
            criteria=[
                "Each listed component renders with production data",
                "Components follow the shared design system and are responsive",
                "Interactive elements are keyboard accessible",
            ],
        )
        return [
            WorkItem(
                title=f"Build {context.subject_name} UI components",
                description=description,
                item_type=ItemType.STORY,
                labels=labels,
                priority=Priority.HIGH,
            )
        ]

    items = []
    for bullet in bullets:
        title = make_item_title(bullet)
        if not title:
            continue
        description = context.describe(
            section,
            summary=f"Build the UI for: {bullet}",
            criteria=[
                f"{bullet} is available in the interface",
                "Loading, empty and error states are handled",
                "The component is covered by UI tests",
            ],
        )
        items.append(
            WorkItem(
                title=title,
                description=description,
                item_type=ItemType.STORY,
                labels=labels,
                priority=Priority.MEDIUM,
            )
        )
    return items


def generate_api_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """One Medium-priority task for the API or integration work in the section."""
    details = (_clean_bullets(section) + _row_details(section))[:MAX_DETAILS]
    description = context.describe(
        section,
        summary=(
            f"Implement the {context.subject_name} API endpoints and service integrations "
            f"described in \"{section.title}\"."
        ),
        details=details,
        notes=_code_notes(section),
        criteria=[
            "Endpoints accept and return the documented request and response shapes",
            "Authentication and error responses follow the API conventions",
            "Integration tests cover success and failure paths",
        ],
    )
    return [
        WorkItem(
            title=f"Implement {context.subject_name} API integration",
            description=description,
            item_type=ItemType.TASK,
            labels=context.labels("api", "integration"),
            priority=Priority.MEDIUM,
        )
    ]


def generate_feature_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """Up to five feature stories; the first is High, the rest Medium."""
    bullets = _clean_bullets(section, MIN_FEATURE_BULLET_LENGTH)[:MAX_FEATURE_ITEMS]

    items = []
    for index, bullet in enumerate(bullets):
        description = context.describe(
            section,
            summary=f"Deliver the following {context.subject_name} capability: {bullet}",
            criteria=[
                f"{bullet} works as described in the document",
                "Edge cases and error states are handled",
                "Automated tests cover the new behaviour",
            ],
        )
        items.append(
            WorkItem(
                title=make_item_title(bullet),
                description=description,
                item_type=ItemType.STORY,
                labels=context.labels("feature"),
                priority=Priority.HIGH if index == 0 else Priority.MEDIUM,
            )
        )
    return items


def generate_requirement_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """Up to five High-priority stories, one per stated requirement."""
    bullets = _clean_bullets(section)[:MAX_REQUIREMENT_ITEMS]

    items = []
    for bullet in bullets:
        description = context.describe(
            section,
            summary=f"Satisfy the requirement: {bullet}",
            criteria=[
                "The requirement is met and verified against the document",
                "The behaviour is covered by automated tests",
                "Any deviation from the requirement is agreed with the document owner",
            ],
        )
        items.append(
            WorkItem(
                title=make_item_title(bullet),
                description=description,
                item_type=ItemType.STORY,
                labels=context.labels("requirement"),
                priority=Priority.HIGH,
            )
        )
    return items


def generate_future_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """Up to three Low-priority backlog stories for roadmap ideas."""
    bullets = _clean_bullets(section)[:MAX_FUTURE_ITEMS]

    items = []
    for bullet in bullets:
        description = context.describe(
            section,
            summary=f"Future enhancement for {context.subject_name}: {bullet}",
            criteria=[
                "Scope and value are confirmed before scheduling",
                "The enhancement is estimated and prioritised against the roadmap",
            ],
        )
        items.append(
            WorkItem(
                title=make_item_title(bullet),
                description=description,
                item_type=ItemType.STORY,
                labels=context.labels("future", "backlog"),
                priority=Priority.LOW,
            )
        )
    return items


def generate_bullet_group_items(section: Section, context: GenerationContext) -> List[WorkItem]:
    """
    Generic fallback for sections no keyword group claimed.

    Emits one Medium task covering all bullets when the section has at least
    two bullets and a non-trivial title.
    """
    bullets = _clean_bullets(section)
    title = section.title.strip()
    if len(bullets) < MIN_GENERIC_BULLETS or len(title) < MIN_GENERIC_TITLE_LENGTH:
        return []

    description = context.describe(
        section,
        summary=f"Work through the items listed under \"{title}\".",
        details=bullets[:MAX_DETAILS],
        criteria=[
            "Every listed item is addressed or explicitly descoped",
            "Outcomes are reviewed with the document owner",
        ],
    )
    return [
        WorkItem(
            title=make_item_title(title),
            description=description,
            item_type=ItemType.TASK,
            labels=context.labels("tasks"),
            priority=Priority.MEDIUM,
        )
    ]


def generate_fallback_item(document_title: str, plain_text: str, context: GenerationContext) -> WorkItem:
    """
    Single "review and implement" story summarizing a whole document.

    Used when no section produced any item, so every analyzed document
    yields at least one item.
    """
    title = document_title.strip()
    preview = plain_text[:FALLBACK_PREVIEW_LENGTH].strip()
    notes = [f"Content preview:\n\n{preview}"] if preview else ["The document has no readable content."]

    description = render_description(
        DescriptionContext(
            summary=(
                f"No actionable sections were recognized in this {context.source_name}. "
                "Review it and break the work down into backlog items."
            ),
            criteria=[
                "The document has been reviewed with its owner",
                "Follow-up backlog items are created for each piece of work",
            ],
            document_title=title,
            source_name=context.source_name,
            notes=notes,
        )
    )
    return WorkItem(
        title=f'Review and implement "{title}"' if title else "Review and implement document contents",
        description=description,
        item_type=ItemType.STORY,
        labels=context.labels("review"),
        priority=Priority.MEDIUM,
    )

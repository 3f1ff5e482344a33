"""
Document classifier for the Classification context.

Detects the document type and subject, then dispatches every actionable
section to the item generator for its keyword group. The decision table is
data: an ordered tuple of (group, predicate, generator) rules evaluated with
first-match-wins semantics, so each rule can be tested on its own.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from docket.contexts.classification.generators import (
    GenerationContext,
    Generator,
    generate_api_items,
    generate_bullet_group_items,
    generate_data_model_items,
    generate_fallback_item,
    generate_feature_items,
    generate_future_items,
    generate_requirement_items,
    generate_setup_items,
    generate_ui_items,
)
from docket.contexts.classification.logger import (
    _log_info,
    log_document_profile,
    log_section_dispatch,
)
from docket.contexts.classification.section_patterns import (
    SECTION_GROUP_PATTERNS,
    SectionGroup,
    detect_document_type,
    extract_subject_name,
    is_non_actionable,
    matches_any,
    normalize_text,
)
from docket.contexts.classification.work_item import WorkItem
from docket.contexts.intake.document_structure import Document, Section

BULLET_GROUP_RULE = "bullet_group"


@dataclass(frozen=True)
class DispatchRule:
    """
    One row of the dispatch table.

    Attributes:
        name: Rule identifier used in logs
        predicate: Decides whether the rule claims a section
        generator: Produces items for a claimed section
    """

    name: str
    predicate: Callable[[Section], bool]
    generator: Generator


def _title_matches(patterns: tuple) -> Callable[[Section], bool]:
    return lambda section: matches_any(normalize_text(section.title), patterns)


def _has_bullets(section: Section) -> bool:
    return len(section.bullets) >= 1


_GROUP_GENERATORS = {
    SectionGroup.SETUP: generate_setup_items,
    SectionGroup.DATA_MODEL: generate_data_model_items,
    SectionGroup.UI_COMPONENTS: generate_ui_items,
    SectionGroup.API_INTEGRATION: generate_api_items,
    SectionGroup.FEATURE: generate_feature_items,
    SectionGroup.REQUIREMENT: generate_requirement_items,
    SectionGroup.FUTURE: generate_future_items,
}

# Keyword groups in priority order, then the generic bullet analyzer
DISPATCH_RULES = tuple(
    DispatchRule(group.value, _title_matches(patterns), _GROUP_GENERATORS[group])
    for group, patterns in SECTION_GROUP_PATTERNS
) + (DispatchRule(BULLET_GROUP_RULE, _has_bullets, generate_bullet_group_items),)


def select_rule(section: Section, rules: tuple = DISPATCH_RULES) -> Optional[DispatchRule]:
    """
    Pick the first rule whose predicate claims the section.

    Args:
        section: Section to dispatch
        rules: Ordered dispatch table

    Returns:
        Matching rule, or None if the section is not actionable or unclaimed
    """
    if is_non_actionable(section.title):
        return None
    for rule in rules:
        if rule.predicate(section):
            return rule
    return None


def build_generation_context(document: Document) -> GenerationContext:
    """Detect document type and subject name for a parsed document."""
    return GenerationContext(
        document_title=document.title,
        document_type=detect_document_type(document.title, document.plain_text()),
        subject_name=extract_subject_name(document.title),
    )


def classify(
    document: Document,
    target_collection_id: str = "",
    context: Optional[GenerationContext] = None,
) -> List[WorkItem]:
    """
    Turn a parsed document into raw (unranked) work items.

    Sections are visited in document order. Non-actionable sections are
    skipped, others go to the first matching rule, and a section that yields
    no items is dropped. If the whole pass yields nothing, a single
    "review and implement" story is synthesized.

    Args:
        document: Parsed document
        target_collection_id: Target project key (recorded in logs only)
        context: Precomputed generation context (detected when omitted)

    Returns:
        Raw work items in generator emission order (never empty)
    """
    context = context or build_generation_context(document)
    log_document_profile(
        document.title, context.document_type, context.subject_name, len(document.sections)
    )

    items: List[WorkItem] = []
    for section in document.sections:
        rule = select_rule(section)
        if rule is None:
            log_section_dispatch(section.title, "skipped", 0)
            continue
        generated = rule.generator(section, context)
        log_section_dispatch(section.title, rule.name, len(generated))
        items.extend(generated)

    if not items:
        _log_info("No actionable sections found, synthesizing review item")
        items.append(generate_fallback_item(document.title, document.plain_text(), context))

    suffix = f" for {target_collection_id}" if target_collection_id else ""
    _log_info(f"Generated {len(items)} raw items{suffix}")
    return items

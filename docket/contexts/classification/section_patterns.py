"""
Pattern matching for document and section classification.

This module provides regex patterns and helper functions to detect the kind
of document being analyzed, pull a subject name out of its title, and sort
section headings into the keyword groups that drive item generation.

Pattern classes follow the convention from intake/markup_patterns.py:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns

Short keywords are anchored on word boundaries so "ui" does not fire inside
"requirements" and "api" does not fire inside "capital".
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

# =============================================================================
# DOCUMENT TYPE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class DocumentTypePatterns:
    """
    Keyword patterns for detecting the document type.

    Tested against the lower-cased title plus body text. The detected tag
    only changes wording and labels of generated items.
    """

    REQUIREMENTS_SPEC: tuple = (
        r"\brequirements?\b",
        r"\bspecification\b",
        r"\bprd\b",
        r"\bsrs\b",
    )

    ARCHITECTURE_DOC: tuple = (
        r"\barchitecture\b",
        r"\bsystem design\b",
        r"\btechnical design\b",
        r"\bdesign doc(?:ument)?\b",
    )

    API_SPEC: tuple = (
        r"\bapis?\b",
        r"\bendpoints?\b",
        r"\bopenapi\b",
        r"\bswagger\b",
    )

    MVP_SCOPE: tuple = (
        r"\bmvp\b",
        r"\bminimum viable\b",
    )

    USER_STORIES: tuple = (
        r"\buser stor(?:y|ies)\b",
        r"\bas an? (?:user|admin|customer)\b",
    )

    ONBOARDING_GUIDE: tuple = (
        r"\bonboarding\b",
        r"\bgetting started\b",
        r"\bnew hires?\b",
    )

    RELEASE_NOTES: tuple = (
        r"\brelease notes?\b",
        r"\bchangelog\b",
        r"\bwhat'?s new\b",
    )

    BUG_REPORT: tuple = (
        r"\bbugs?\b",
        r"\bdefects?\b",
        r"\bsteps to reproduce\b",
    )


GENERAL_DOCUMENT_TYPE = "general"

# Detection order: first match wins
DOCUMENT_TYPE_PATTERNS = (
    ("requirements-spec", DocumentTypePatterns.REQUIREMENTS_SPEC),
    ("architecture-doc", DocumentTypePatterns.ARCHITECTURE_DOC),
    ("api-spec", DocumentTypePatterns.API_SPEC),
    ("mvp-scope", DocumentTypePatterns.MVP_SCOPE),
    ("user-stories", DocumentTypePatterns.USER_STORIES),
    ("onboarding-guide", DocumentTypePatterns.ONBOARDING_GUIDE),
    ("release-notes", DocumentTypePatterns.RELEASE_NOTES),
    ("bug-report", DocumentTypePatterns.BUG_REPORT),
)

# Human wording for each document type
DOCUMENT_TYPE_NAMES = {
    "requirements-spec": "requirements specification",
    "architecture-doc": "architecture document",
    "api-spec": "API specification",
    "mvp-scope": "MVP scope document",
    "user-stories": "user story collection",
    "onboarding-guide": "onboarding guide",
    "release-notes": "release notes",
    "bug-report": "bug report",
    GENERAL_DOCUMENT_TYPE: "document",
}

# =============================================================================
# SUBJECT NAME PATTERNS
# =============================================================================

_SUBJECT = r"([A-Za-z0-9][\w-]*(?:\s+[A-Za-z0-9][\w-]*){0,2}?)"
_SUBJECT_NOUN = r"(?:app|application|project|platform|system|service|spec|specification|design)"


@dataclass(frozen=True)
class SubjectNamePatterns:
    """
    Ordered title patterns for extracting the subject of a document.

    Matched case-insensitively against the title; the first capturing match
    wins. The "for/about" form is tried first because a leading capture would
    otherwise swallow phrases like "Design doc for".
    """

    # "Design doc for the Mobile Wallet app" -> "Mobile Wallet"
    FOR_ABOUT: str = rf"\b(?:for|about)\s+(?:the\s+|an?\s+)?{_SUBJECT}\s+{_SUBJECT_NOUN}\b"

    # "Mobile Wallet App Spec" -> "Mobile Wallet"
    LEADING: str = rf"^\s*{_SUBJECT}\s+{_SUBJECT_NOUN}\b"


SUBJECT_NAME_PATTERNS = (SubjectNamePatterns.FOR_ABOUT, SubjectNamePatterns.LEADING)

DEFAULT_SUBJECT_NAME = "Project"

# =============================================================================
# SECTION GROUP PATTERNS
# =============================================================================


class SectionGroup(str, Enum):
    """Mutually exclusive keyword groups a section heading can fall into."""

    SETUP = "setup"
    DATA_MODEL = "data_model"
    UI_COMPONENTS = "ui_components"
    API_INTEGRATION = "api_integration"
    FEATURE = "feature"
    REQUIREMENT = "requirement"
    FUTURE = "future"


@dataclass(frozen=True)
class SectionGroupPatterns:
    """
    Heading keyword patterns for each section group.

    Groups are tested in a fixed priority order (see SECTION_GROUP_PATTERNS);
    the first group with a matching pattern wins.
    """

    SETUP: tuple = (
        r"\bstructure\b",
        r"\bfolders?\b",
        r"\barchitecture\b",
        r"\bset ?up\b",
        r"\btooling\b",
    )

    DATA_MODEL: tuple = (
        r"\bdata\b",
        r"\bmodels?\b",
        r"\bstorage\b",
        r"\bdatabases?\b",
        r"\bpersistence\b",
        r"\bschemas?\b",
    )

    UI_COMPONENTS: tuple = (
        r"\bcomponents?\b",
        r"\bui\b",
        r"\binterfaces?\b",
        r"\bviews?\b",
        r"\bscreens?\b",
    )

    API_INTEGRATION: tuple = (
        r"\bapis?\b",
        r"\bendpoints?\b",
        r"\bservices?\b",
        r"\bintegrations?\b",
    )

    FEATURE: tuple = (
        r"\bfeatures?\b",
        r"\bfunctionality\b",
        r"\bcapabilit(?:y|ies)\b",
    )

    REQUIREMENT: tuple = (
        r"\brequirements?\b",
        r"\bscope\b",
    )

    FUTURE: tuple = (
        r"\bfuture\b",
        r"\broadmap\b",
        r"\bbacklog\b",
        r"\bnice to have\b",
    )


SECTION_GROUP_PATTERNS = (
    (SectionGroup.SETUP, SectionGroupPatterns.SETUP),
    (SectionGroup.DATA_MODEL, SectionGroupPatterns.DATA_MODEL),
    (SectionGroup.UI_COMPONENTS, SectionGroupPatterns.UI_COMPONENTS),
    (SectionGroup.API_INTEGRATION, SectionGroupPatterns.API_INTEGRATION),
    (SectionGroup.FEATURE, SectionGroupPatterns.FEATURE),
    (SectionGroup.REQUIREMENT, SectionGroupPatterns.REQUIREMENT),
    (SectionGroup.FUTURE, SectionGroupPatterns.FUTURE),
)

# =============================================================================
# NON-ACTIONABLE SECTIONS
# =============================================================================

# Substring matches against the lower-cased heading
NON_ACTIONABLE_KEYWORDS = (
    "overview",
    "introduction",
    "background",
    "summary",
    "table of contents",
    "version history",
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def normalize_text(text: str) -> str:
    """Lower-case and collapse whitespace for pattern matching."""
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def matches_any(text: str, patterns: tuple) -> bool:
    """True if any pattern is found in the already-normalized text."""
    return any(re.search(pattern, text) for pattern in patterns)


def detect_document_type(title: str, body_text: str) -> str:
    """
    Detect the document type from its title and plain text.

    Args:
        title: Document title
        body_text: Document plain text

    Returns:
        Document type tag (e.g., "api-spec"), or "general" if nothing matched
    """
    haystack = normalize_text(f"{title} {body_text}")
    for doc_type, patterns in DOCUMENT_TYPE_PATTERNS:
        if matches_any(haystack, patterns):
            return doc_type
    return GENERAL_DOCUMENT_TYPE


def extract_subject_name(title: str) -> str:
    """
    Extract the subject (product, app, project) a document is about.

    Args:
        title: Document title

    Returns:
        First capturing pattern match, else the title's first token,
        else "Project" for an empty title
    """
    title = (title or "").strip()
    for pattern in SUBJECT_NAME_PATTERNS:
        match = re.search(pattern, title, re.IGNORECASE)
        if match and match.group(1).strip():
            return match.group(1).strip()

    if not title:
        return DEFAULT_SUBJECT_NAME

    first_token = title.split()[0].strip(".,:;!?\"'()[]{}—–-")
    return first_token or DEFAULT_SUBJECT_NAME


def subject_label(subject_name: str) -> str:
    """Coerce a subject name to label form ("Mobile Wallet" -> "mobile-wallet")."""
    return re.sub(r"[^a-z0-9]+", "-", subject_name.lower()).strip("-")


def is_non_actionable(section_title: str) -> bool:
    """True if the heading names an overview-style section that implies no work."""
    normalized = normalize_text(section_title)
    return any(keyword in normalized for keyword in NON_ACTIONABLE_KEYWORDS)


def match_section_group(section_title: str) -> Optional[SectionGroup]:
    """
    Match a section heading to its keyword group.

    Args:
        section_title: Section heading text

    Returns:
        First matching SectionGroup in priority order, or None
    """
    normalized = normalize_text(section_title)
    for group, patterns in SECTION_GROUP_PATTERNS:
        if matches_any(normalized, patterns):
            return group
    return None

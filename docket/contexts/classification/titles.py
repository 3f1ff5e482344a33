"""
Title helpers for generated work items.

Bullet text from a page rarely reads like a ticket summary. These helpers
clean it up: list markers go, whitespace collapses, long text is cut at a
word boundary, and an action verb is added when the text lacks one.
"""

import re

MAX_BULLET_TITLE_LENGTH = 80
ELLIPSIS = "..."
DEFAULT_ACTION_VERB = "Implement"

# Leading list markers: -, *, +, bullets, "1." and "1)"
BULLET_MARKER_PATTERN = re.compile(r"^\s*(?:[-*+•◦▪‣·]+\s*|\d+[.)]\s+)")

# Titles that already start with one of these need no prefix
ACTION_VERBS = frozenset(
    {
        "add",
        "allow",
        "build",
        "configure",
        "create",
        "define",
        "deploy",
        "design",
        "develop",
        "display",
        "document",
        "enable",
        "ensure",
        "fix",
        "generate",
        "handle",
        "implement",
        "improve",
        "integrate",
        "investigate",
        "migrate",
        "provide",
        "refactor",
        "remove",
        "review",
        "set",
        "setup",
        "show",
        "store",
        "support",
        "test",
        "update",
        "validate",
        "write",
    }
)


def clean_bullet_text(text: str) -> str:
    """
    Strip leading list markers and collapse whitespace.

    Args:
        text: Raw bullet text

    Returns:
        Cleaned single-line text
    """
    text = BULLET_MARKER_PATTERN.sub("", text or "", count=1)
    return " ".join(text.split())


def truncate_at_word(text: str, max_length: int = MAX_BULLET_TITLE_LENGTH) -> str:
    """
    Truncate text to at most max_length characters at a word boundary.

    The ellipsis counts toward the limit. A single word longer than the
    limit is cut mid-word.

    Example:
        >>> truncate_at_word("Support exporting invoices to PDF", 20)
        'Support exporting...'
    """
    if len(text) <= max_length:
        return text

    budget = max_length - len(ELLIPSIS)
    cut = text[: budget + 1]
    if " " in cut:
        cut = cut[: cut.rindex(" ")]
    else:
        cut = cut[:budget]
    return cut.rstrip(" ,;:-") + ELLIPSIS


def starts_with_action_verb(text: str) -> bool:
    """True if the first word of text is a known action verb."""
    first_word = re.split(r"[^A-Za-z]+", text.strip(), maxsplit=1)[0].lower()
    return first_word in ACTION_VERBS


def capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def make_item_title(text: str, max_length: int = MAX_BULLET_TITLE_LENGTH) -> str:
    """
    Turn bullet text into a work item title.

    Steps: strip markers, collapse whitespace, truncate at a word boundary,
    prefix "Implement" unless an action verb already leads, capitalize.

    Args:
        text: Raw bullet text
        max_length: Truncation limit applied before prefixing

    Returns:
        Title string (empty if the bullet had no text)

    Example:
        >>> make_item_title("- user can reset password via email")
        'Implement user can reset password via email'
        >>> make_item_title("* build the onboarding wizard")
        'Build the onboarding wizard'
    """
    cleaned = clean_bullet_text(text)
    if not cleaned:
        return ""

    title = truncate_at_word(cleaned, max_length)
    if not starts_with_action_verb(title):
        # Keep acronyms like "API" intact
        if not title[1:2].isupper():
            title = title[:1].lower() + title[1:]
        title = f"{DEFAULT_ACTION_VERB} {title}"
    return capitalize_first(title)

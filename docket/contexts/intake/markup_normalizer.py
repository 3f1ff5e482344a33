"""
Storage-format markup normalizer for the Intake context.

Flattens Confluence XHTML fragments into plain text. Every other intake and
classification step reads text produced here, so the function is total:
malformed or unbalanced markup degrades to best-effort text and never raises.
"""

from docket.contexts.intake.markup_patterns import (
    NAMED_ENTITIES,
    UNICODE_REPLACEMENTS,
    InlineMarkupPatterns,
)


def decode_entities(text: str) -> str:
    """
    Decode the fixed set of named character entities.

    Args:
        text: Text possibly containing entities like &amp; or &rarr;

    Returns:
        Text with known entities replaced; unknown entities are left as-is
    """
    for entity, replacement in NAMED_ENTITIES.items():
        text = text.replace(entity, replacement)
    return text


def normalize_unicode(text: str) -> str:
    """Replace non-breaking spaces and drop zero-width characters."""
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def strip_markup(fragment: str) -> str:
    """
    Convert a markup fragment to plain text.

    Steps:
    1. Line breaks and closing paragraph/row/list-item/heading tags become newlines
    2. All remaining tags are removed
    3. Named entities are decoded
    4. Runs of 3+ newlines collapse to exactly 2

    Args:
        fragment: Storage-format markup (may be empty or malformed)

    Returns:
        Plain text, trimmed

    Example:
        >>> strip_markup("<p>Hello&nbsp;<strong>world</strong></p><p>Bye</p>")
        'Hello world\\nBye'
    """
    if not fragment:
        return ""

    text = InlineMarkupPatterns.LINE_BREAK.sub("\n", fragment)
    text = InlineMarkupPatterns.BLOCK_CLOSE.sub("\n", text)
    text = InlineMarkupPatterns.TAG.sub("", text)
    text = decode_entities(text)
    text = normalize_unicode(text)
    text = InlineMarkupPatterns.EXCESS_NEWLINES.sub("\n\n", text)

    return text.strip()


def collapse_whitespace(text: str) -> str:
    """Collapse all whitespace runs (including newlines) to single spaces."""
    return " ".join(text.split())


def strip_inline(fragment: str) -> str:
    """Flatten a fragment to a single trimmed line (headings, list items, cells)."""
    return collapse_whitespace(strip_markup(fragment))

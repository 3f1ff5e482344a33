"""
Regex patterns for Confluence storage-format markup.

Pattern classes follow the same convention across contexts:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns live in the consuming modules

All patterns are compiled case-insensitive and dot-all, since storage format
is XHTML and element bodies routinely span lines.
"""

import re
from dataclasses import dataclass

_FLAGS = re.IGNORECASE | re.DOTALL


@dataclass(frozen=True)
class InlineMarkupPatterns:
    """Patterns used when flattening a markup fragment to plain text."""

    # <br>, <br/>, <br />
    LINE_BREAK: re.Pattern = re.compile(r"<br\s*/?>", _FLAGS)

    # Closing tags that end a visual line: paragraphs, rows, list items, headings
    BLOCK_CLOSE: re.Pattern = re.compile(r"</(?:p|tr|li|div|h[1-6])\s*>", _FLAGS)

    # Any remaining tag-like construct, including Confluence ac:/ri: elements
    TAG: re.Pattern = re.compile(r"<[^>]*>", _FLAGS)

    # Three or more newlines (with optional trailing spaces) collapse to a blank line
    EXCESS_NEWLINES: re.Pattern = re.compile(r"(?:[ \t]*\n){3,}")


@dataclass(frozen=True)
class StructurePatterns:
    """Patterns for locating structural constructs inside a page body."""

    # <h1>..</h1> through <h6>..</h6>; group 1 = level, group 2 = inner markup
    HEADING: re.Pattern = re.compile(r"<h([1-6])\b[^>]*>(.*?)</h\1\s*>", _FLAGS)

    # A list item's own text runs until the next item, a nested list, or a list close
    LIST_ITEM: re.Pattern = re.compile(
        r"<li\b[^>]*>(.*?)(?=<li\b|</li\s*>|<[ou]l\b|</[ou]l\s*>|\Z)", _FLAGS
    )

    # Ordered list blocks (their items are also collected as numbered items)
    ORDERED_LIST: re.Pattern = re.compile(r"<ol\b[^>]*>(.*?)</ol\s*>", _FLAGS)

    # Code constructs, scanned left to right so <pre><code> is consumed once:
    # group 1 = code macro CDATA body, group 2 = <pre> body, group 3 = <code> body
    CODE: re.Pattern = re.compile(
        r"<ac:plain-text-body>\s*<!\[CDATA\[(.*?)\]\]>\s*</ac:plain-text-body>"
        r"|<pre\b[^>]*>(.*?)</pre\s*>"
        r"|<code\b[^>]*>(.*?)</code\s*>",
        _FLAGS,
    )

    TABLE: re.Pattern = re.compile(r"<table\b[^>]*>(.*?)</table\s*>", _FLAGS)
    TABLE_ROW: re.Pattern = re.compile(r"<tr\b[^>]*>(.*?)</tr\s*>", _FLAGS)

    # Header and data cells are treated alike
    TABLE_CELL: re.Pattern = re.compile(r"<t[hd]\b[^>]*>(.*?)</t[hd]\s*>", _FLAGS)


# Named character entities decoded by the normalizer.
# "&amp;" is decoded last so "&amp;lt;" becomes "&lt;" rather than "<".
NAMED_ENTITIES = {
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&lsquo;": "'",
    "&rsquo;": "'",
    "&ldquo;": '"',
    "&rdquo;": '"',
    "&rarr;": "→",
    "&larr;": "←",
    "&harr;": "↔",
    "&rArr;": "⇒",
    "&ndash;": "–",
    "&mdash;": "—",
    "&hellip;": "…",
    "&amp;": "&",
}

# Invisible or awkward characters that survive in pasted Confluence content
UNICODE_REPLACEMENTS = {
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM
}

"""
Section extraction for the Intake context.

Splits a storage-format page into sections by heading boundaries and parses
each section's body into text, list items, code samples and tables.

Pattern follows the rest of intake: patterns live in markup_patterns.py,
this module only walks the markup and builds the Document.
"""

from loguru import logger

from docket.contexts.intake.document_structure import (
    MAIN_CONTENT_TITLE,
    Document,
    Section,
    TableRows,
)
from docket.contexts.intake.markup_normalizer import strip_inline, strip_markup
from docket.contexts.intake.markup_patterns import StructurePatterns


def extract_list_items(markup: str) -> list[str]:
    """
    Extract the text of every list item, trimmed, empties discarded.

    A nested list contributes its own items; the parent item keeps only the
    text before the nested list starts.

    Args:
        markup: Body span markup

    Returns:
        List item texts in document order
    """
    items = []
    for match in StructurePatterns.LIST_ITEM.finditer(markup):
        text = strip_inline(match.group(1))
        if text:
            items.append(text)
    return items


def extract_numbered_items(markup: str) -> list[str]:
    """Extract list items that sit inside ordered lists."""
    items = []
    for block in StructurePatterns.ORDERED_LIST.finditer(markup):
        items.extend(extract_list_items(block.group(1)))
    return items


def extract_code_blocks(markup: str) -> list[str]:
    """
    Extract code macro bodies, <pre> blocks and inline <code> spans.

    CDATA bodies are taken verbatim; <pre>/<code> contents are flattened so
    entities like &lt; come back as characters.

    Args:
        markup: Body span markup

    Returns:
        Trimmed, non-empty code fragments in document order
    """
    blocks = []
    for match in StructurePatterns.CODE.finditer(markup):
        cdata, pre, code = match.groups()
        if cdata is not None:
            text = cdata.strip()
        else:
            text = strip_markup(pre if pre is not None else code)
        if text:
            blocks.append(text)
    return blocks


def extract_tables(markup: str) -> list[TableRows]:
    """
    Extract tables as rows of cell texts.

    Header and data cells are both included. Rows yielding zero cells are
    discarded; tables whose rows are all discarded are kept as empty tuples
    so table counts stay faithful to the page.

    Args:
        markup: Body span markup

    Returns:
        One tuple of rows per table
    """
    tables = []
    for table in StructurePatterns.TABLE.finditer(markup):
        rows = []
        for row in StructurePatterns.TABLE_ROW.finditer(table.group(1)):
            cells = tuple(
                strip_inline(cell.group(1))
                for cell in StructurePatterns.TABLE_CELL.finditer(row.group(1))
            )
            if cells:
                rows.append(cells)
        tables.append(tuple(rows))
    return tables


def build_section(level: int, title: str, body_markup: str) -> Section:
    """Parse one body span into a Section."""
    return Section(
        level=level,
        title=title,
        body_text=strip_markup(body_markup),
        bullets=tuple(extract_list_items(body_markup)),
        numbered_items=tuple(extract_numbered_items(body_markup)),
        code_blocks=tuple(extract_code_blocks(body_markup)),
        tables=tuple(extract_tables(body_markup)),
    )


def extract_sections(markup_body: str, title: str = "") -> Document:
    """
    Split a page body into sections by heading boundaries.

    Each heading's body is the markup between its end and the next heading's
    start (or the end of the page). Content before the first heading is not
    part of any section. A page with no headings yields exactly one level-1
    section titled "Main Content" covering the whole body.

    Args:
        markup_body: Storage-format page body (may be empty)
        title: Page title carried onto the Document

    Returns:
        Document with sections in heading order
    """
    markup_body = markup_body or ""
    headings = list(StructurePatterns.HEADING.finditer(markup_body))

    if not headings:
        logger.debug("No headings found, treating page as a single section")
        return Document(
            title=title,
            sections=(build_section(1, MAIN_CONTENT_TITLE, markup_body),),
        )

    preamble = strip_markup(markup_body[: headings[0].start()])
    if preamble:
        logger.debug(f"Discarded preamble before first heading: '{preamble[:80]}'")

    sections = []
    for index, heading in enumerate(headings):
        body_end = headings[index + 1].start() if index + 1 < len(headings) else len(markup_body)
        body_markup = markup_body[heading.end() : body_end]
        sections.append(
            build_section(
                level=int(heading.group(1)),
                title=strip_inline(heading.group(2)),
                body_markup=body_markup,
            )
        )

    return Document(title=title, sections=tuple(sections))

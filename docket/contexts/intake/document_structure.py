"""
Document data structure for the Intake context.

A Document is built once per analysis from a page's storage-format body and
is immutable afterwards. Sections keep document order; nothing re-sorts them.
"""

from dataclasses import dataclass, field
from typing import Tuple

# Title of the synthetic section produced for pages without headings
MAIN_CONTENT_TITLE = "Main Content"

TableRows = Tuple[Tuple[str, ...], ...]


@dataclass(frozen=True)
class Section:
    """
    A heading and the content beneath it up to the next heading of any level.

    Attributes:
        level: Heading level, 1-6
        title: Heading text with markup stripped
        body_text: Whole body span flattened to plain text
        bullets: Text of every list item (ordered and unordered), in order
        numbered_items: Text of items that sit inside ordered lists
        code_blocks: Code macro, <pre> and <code> contents
        tables: Each table as rows of cell texts
    """

    level: int
    title: str
    body_text: str = ""
    bullets: Tuple[str, ...] = ()
    numbered_items: Tuple[str, ...] = ()
    code_blocks: Tuple[str, ...] = ()
    tables: Tuple[TableRows, ...] = ()

    @property
    def table_rows(self) -> list[tuple[str, ...]]:
        """All rows of all tables, flattened in document order."""
        return [row for table in self.tables for row in table]

    def is_empty(self) -> bool:
        """True when the section carries no text, lists, code or tables."""
        return not (
            self.body_text or self.bullets or self.code_blocks or self.tables
        )


@dataclass(frozen=True)
class Document:
    """Parsed page: a title plus its ordered sections."""

    title: str
    sections: Tuple[Section, ...] = field(default_factory=tuple)

    def plain_text(self) -> str:
        """Body text of every section joined with blank lines."""
        return "\n\n".join(s.body_text for s in self.sections if s.body_text)

    def section_titles(self) -> list[str]:
        return [s.title for s in self.sections]

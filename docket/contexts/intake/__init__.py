"""
Intake Context

Responsibilities:
- Converts Confluence storage-format markup into plain text fragments
- Splits a page into ordered sections by heading boundaries
- Extracts bullets, numbered items, code samples and tables per section

Owns: Markup parsing and the Document/Section model
Never: Decides what work a section implies
"""

from docket.contexts.intake.document_structure import MAIN_CONTENT_TITLE, Document, Section
from docket.contexts.intake.markup_normalizer import strip_markup
from docket.contexts.intake.section_extractor import extract_sections

__all__ = [
    "Document",
    "Section",
    "MAIN_CONTENT_TITLE",
    "strip_markup",
    "extract_sections",
]

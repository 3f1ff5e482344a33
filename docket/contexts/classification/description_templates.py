"""
Description Templates

Registry for loading and caching the Jinja2 templates that render work item
descriptions, plus the pure render function generators call.

Every description follows one two-block layout: a Description block (summary,
optional detail bullets and notes, source line) and an Acceptance Criteria
checklist block.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

TEMPLATES_PATH = Path(__file__).parent / "templates"
WORK_ITEM_TEMPLATE = "work_item.md.jinja"


@dataclass(frozen=True)
class DescriptionContext:
    """
    Everything a description template needs.

    Attributes:
        summary: One-paragraph statement of the work
        criteria: Acceptance criteria, rendered as "- [ ]" checklist lines
        document_title: Title of the source page
        source_name: Human wording of the document type (e.g., "API specification")
        section_title: Heading the item came from, if any
        details: Supporting bullets (fields, endpoints, listed items)
        notes: Free-form trailing lines (e.g., code sample counts)
    """

    summary: str
    criteria: List[str]
    document_title: str
    source_name: str = "document"
    section_title: Optional[str] = None
    details: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)


class DescriptionTemplateRegistry:
    """
    Registry for loading and caching description templates.

    Templates live in classification/templates/ and use standard Jinja2
    delimiters (descriptions are markdown, not LaTeX).
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding *.jinja templates. Defaults to
                           the templates/ directory shipped with this package
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = templates_path
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )

    def get_template(self, name: str = WORK_ITEM_TEMPLATE) -> Template:
        """
        Get a template by file name, loading and caching it if necessary.

        Raises:
            TemplateNotFound: If template file doesn't exist
        """
        if name in self._cache:
            return self._cache[name]

        try:
            template = self.env.get_template(name)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Description template '{name}' not found in {self.templates_path}"
            ) from e

        self._cache[name] = template
        return template

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache


_default_registry = DescriptionTemplateRegistry()


def render_description(
    context: DescriptionContext, registry: DescriptionTemplateRegistry = None
) -> str:
    """
    Render a work item description.

    Pure with respect to its inputs: the same context always yields the same
    text, so rendered descriptions can be snapshot-tested.

    Args:
        context: Values for the template
        registry: Template registry (defaults to the shared package registry)

    Returns:
        Description text with Description and Acceptance Criteria blocks
    """
    registry = registry or _default_registry
    template = registry.get_template(WORK_ITEM_TEMPLATE)
    rendered = template.render(
        summary=context.summary,
        criteria=context.criteria,
        document_title=context.document_title,
        source_name=context.source_name,
        section_title=context.section_title,
        details=context.details,
        notes=context.notes,
    )
    return rendered.strip()

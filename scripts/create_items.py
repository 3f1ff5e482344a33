#!/usr/bin/env python3
"""
Create the stored analysis items in Jira.

Reads the analysis stored by analyze_document.py (or import_items.py) for a
page/project pair, asks for confirmation, and creates one issue per item.
Per-item failures are reported alongside the successes.

Usage:
    python scripts/create_items.py 123456789 --project PAY
    python scripts/create_items.py 123456789 --project PAY --yes
"""

import asyncio
from pathlib import Path

import typer
from typing_extensions import Annotated

from docket.config import load_settings
from docket.contexts.analysis import build_service
from docket.contexts.creation import CreationOutcome
from docket.contexts.creation.logger import setup_creation_logger
from docket.exceptions import DocketError
from docket.integrations.confluence import extract_page_id
from docket.utils.timestamp import now

app = typer.Typer(help="Create stored backlog items in Jira.", add_completion=False)


async def _create(settings: dict, page_id: str, project: str, assume_yes: bool):
    service = build_service(settings)
    try:
        stored = await service.get_stored(page_id, project)
        if not stored.found:
            return None

        items = list(stored.data.items)
        typer.echo(f"\n{len(items)} items from \"{stored.data.document_title}\" (cached {stored.cache_age}):")
        for index, item in enumerate(items, start=1):
            typer.echo(f"  {index:>2}. [{item.priority.value}] {item.title}")

        if not assume_yes and not typer.confirm(f"\nCreate {len(items)} issues in {project}?"):
            raise typer.Abort()

        return await service.create_items(project, page_id, stored.data.document_title, items)
    finally:
        await service.aclose()


def print_outcome(outcome: CreationOutcome) -> None:
    typer.echo(f"\n=== Created ({len(outcome.created)}) ===")
    for record in outcome.created:
        typer.echo(f"  {record.external_id}: {record.title}")

    if outcome.errors:
        typer.echo(f"\n=== Failed ({len(outcome.errors)}) ===")
        for failure in outcome.errors:
            typer.echo(f"  ! {failure.item.title}: {failure.error_message}")


@app.command()
def main(
    page: Annotated[str, typer.Argument(help="Confluence page ID or URL")],
    project: Annotated[str, typer.Option("--project", "-p", help="Target Jira project key")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip the confirmation prompt")] = False,
):
    """Submit the stored analysis for a page to Jira."""
    page_id = extract_page_id(page)
    if page_id is None:
        typer.echo(f"ERROR: Could not find a page ID in: {page}", err=True)
        raise typer.Exit(1)

    settings = load_settings()
    log_dir = Path(settings["logging"]["path"]) / f"create_{now()}"
    setup_creation_logger(log_dir, extra_provenance={"Page": page_id, "Project": project})

    try:
        outcome = asyncio.run(_create(settings, page_id, project, yes))
    except DocketError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if outcome is None:
        typer.echo(
            f"ERROR: No stored analysis for page {page_id} / {project}. Run analyze_document.py first.",
            err=True,
        )
        raise typer.Exit(1)

    print_outcome(outcome)
    if outcome.has_errors:
        typer.secho(f"\n! {len(outcome.errors)} item(s) failed", fg=typer.colors.YELLOW)
        raise typer.Exit(1)

    typer.secho(f"\n✓ Created {len(outcome.created)} issues", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

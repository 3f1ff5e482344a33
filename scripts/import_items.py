#!/usr/bin/env python3
"""
Store an externally generated item batch as a page's analysis.

The batch is a JSON file holding a list of items or an object with an
"issues" list and an optional "summary". Items are normalized (type and
priority coercion, label splitting) and stored without running the
classifier, ready for create_items.py.

Usage:
    python scripts/import_items.py 123456789 --project PAY batch.json
    python scripts/import_items.py 123456789 --project PAY batch.json --title "Payments MVP"
"""

import asyncio
from pathlib import Path

import typer
from typing_extensions import Annotated

from docket.config import load_settings
from docket.contexts.analysis import AnalysisResult, build_service
from docket.contexts.analysis.logger import setup_analysis_logger
from docket.exceptions import DocketError
from docket.integrations.confluence import extract_page_id
from docket.utils.timestamp import now

app = typer.Typer(help="Import an external item batch as a stored analysis.", add_completion=False)


async def _import(settings: dict, page_id: str, project: str, title: str, payload: str) -> AnalysisResult:
    service = build_service(settings)
    try:
        return await service.import_items(page_id, title, project, payload)
    finally:
        await service.aclose()


@app.command()
def main(
    page: Annotated[str, typer.Argument(help="Confluence page ID or URL")],
    batch: Annotated[Path, typer.Argument(help="Item batch JSON file")],
    project: Annotated[str, typer.Option("--project", "-p", help="Target Jira project key")],
    title: Annotated[str, typer.Option("--title", help="Document title to record")] = "",
):
    """Normalize and store an item batch for a page."""
    page_id = extract_page_id(page)
    if page_id is None:
        typer.echo(f"ERROR: Could not find a page ID in: {page}", err=True)
        raise typer.Exit(1)

    if not batch.exists():
        typer.echo(f"ERROR: Batch file not found: {batch}", err=True)
        raise typer.Exit(1)

    settings = load_settings()
    log_dir = Path(settings["logging"]["path"]) / f"import_{now()}"
    setup_analysis_logger(log_dir, extra_provenance={"Page": page_id, "Project": project, "Batch": batch})

    try:
        result = asyncio.run(_import(settings, page_id, project, title, batch.read_text(encoding="utf-8")))
    except DocketError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    typer.echo(f"\n{result.summary}")
    for index, item in enumerate(result.items, start=1):
        typer.echo(f"  {index:>2}. [{item.priority.value}] {item.item_type.value}: {item.title}")

    typer.secho(f"\n✓ Stored {len(result.items)} items. Run create_items.py to submit.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

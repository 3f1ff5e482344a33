#!/usr/bin/env python3
"""
Analyze a Confluence page into a ranked backlog.

Fetches the page (or reads a local storage-format file), classifies its
sections into work items, and stores the result in the analysis cache so
create_items.py can submit it.

Usage:
    python scripts/analyze_document.py 123456789 --project PAY
    python scripts/analyze_document.py https://acme.atlassian.net/wiki/spaces/ENG/pages/123456789/Spec --project PAY --refresh
    python scripts/analyze_document.py 123456789 --project PAY --file page.xhtml --json
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from docket.config import load_settings
from docket.contexts.analysis import AnalysisResponse, analyze_markup, build_cache, build_service
from docket.contexts.analysis.logger import setup_analysis_logger
from docket.exceptions import DocketError
from docket.integrations.confluence import extract_page_id
from docket.utils.timestamp import now

app = typer.Typer(help="Analyze a Confluence page into backlog items.", add_completion=False)


def print_response(response: AnalysisResponse) -> None:
    """Print summary and items in a compact, reviewable form."""
    result = response.result
    source = f"cached {response.cache_age}" if response.from_cache else "fresh analysis"

    typer.echo(f"\n=== {result.document_title or '(untitled)'} ({source}) ===")
    typer.echo(result.summary)
    typer.echo(
        f"Sections: {result.meta.sections_found}  "
        f"Type: {result.meta.document_type}  Subject: {result.meta.subject_name}"
    )

    typer.echo(f"\n=== Items ({len(result.items)}) ===")
    for index, item in enumerate(result.items, start=1):
        typer.echo(f"  {index:>2}. [{item.priority.value:<7}] {item.item_type.value:<5} {item.title}")
        if item.labels:
            typer.echo(f"      labels: {', '.join(item.labels)}")


async def _analyze_remote(settings: dict, page_id: str, project: str, refresh: bool) -> AnalysisResponse:
    service = build_service(settings)
    try:
        return await service.analyze(page_id, "", project, force_refresh=refresh)
    finally:
        await service.aclose()


async def _analyze_file(settings: dict, page_id: str, project: str, file: Path) -> AnalysisResponse:
    cache = build_cache(settings)
    ranking = settings.get("ranking", {})
    result = analyze_markup(
        document_title=file.stem,
        markup_body=file.read_text(encoding="utf-8"),
        created_at_epoch_ms=cache.clock(),
        target_collection_id=project,
        max_items=ranking.get("max_items", 10),
        key_length=ranking.get("key_length", 40),
    )
    await cache.put(page_id, project, result)
    return AnalysisResponse(result=result, from_cache=False, cache_age="0s ago")


@app.command()
def main(
    page: Annotated[str, typer.Argument(help="Confluence page ID or URL")],
    project: Annotated[str, typer.Option("--project", "-p", help="Target Jira project key")],
    refresh: Annotated[bool, typer.Option("--refresh", help="Ignore and replace the cached analysis")] = False,
    file: Annotated[
        Optional[Path], typer.Option("--file", "-f", help="Analyze a local storage-format file instead")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the result as JSON")] = False,
):
    """Analyze a page and store the ranked items for review."""
    page_id = extract_page_id(page)
    if page_id is None:
        typer.echo(f"ERROR: Could not find a page ID in: {page}", err=True)
        raise typer.Exit(1)

    if file is not None and not file.exists():
        typer.echo(f"ERROR: File not found: {file}", err=True)
        raise typer.Exit(1)

    settings = load_settings()
    log_dir = Path(settings["logging"]["path"]) / f"analyze_{now()}"
    setup_analysis_logger(log_dir, extra_provenance={"Page": page_id, "Project": project})

    try:
        if file is not None:
            response = asyncio.run(_analyze_file(settings, page_id, project, file))
        else:
            response = asyncio.run(_analyze_remote(settings, page_id, project, refresh))
    except DocketError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(response.to_dict(), indent=2))
        return

    print_response(response)
    typer.secho("\n✓ Analysis stored. Run create_items.py to submit.", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

"""daybook list / daybook recent.

  daybook list [ROOT]                    ordered table per collection
  daybook list --collection "day 9"      one collection only
  daybook list --drafts                  include drafts (marked)
  daybook recent [ROOT] --limit 10       newest records first
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from daybook.cli.common import console, load_settings, print_issues, scan_or_exit
from daybook.cli.errors import err_collection_not_found
from daybook.content.models import Collection
from daybook.content.ordering import recent_records
from daybook.content.templates import resolve_collection


def list_cmd(
    root: Annotated[
        Path | None,
        typer.Argument(help="Content root holding the 'day N' folders. Defaults to content.root."),
    ] = None,
    collection: Annotated[
        str | None,
        typer.Option("--collection", "-c", help="Show a single collection, e.g. 'day 9'."),
    ] = None,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", help="Include draft records (preview mode)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Do not print per-file warnings."),
    ] = False,
) -> None:
    """Show the navigable order of every collection."""
    cfg, content_root, settings = load_settings(root)
    include_drafts = drafts or cfg.content.include_drafts

    corpus = scan_or_exit(content_root, settings)
    print_issues(corpus.report, quiet=quiet)

    collections = list(corpus.collections)
    if collection is not None:
        found = corpus.collection(collection)
        if found is None:
            console.print(err_collection_not_found(collection, [c.collection_id for c in collections]))
            raise typer.Exit(1)
        collections = [found]

    for c in collections:
        _print_collection(c, include_drafts)


def _print_collection(collection: Collection, include_drafts: bool) -> None:
    entries = resolve_collection(collection, include_drafts=include_drafts)
    if not entries:
        console.print(f"\n[bold]{collection.collection_id}[/]  [dim]no content yet[/]")
        return

    table = Table(title=collection.collection_id, title_justify="left", header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Slug", style="bold")
    table.add_column("Title")
    table.add_column("Weight", justify="right")
    table.add_column("Date", style="dim")
    table.add_column("Template", style="dim")

    for e in entries:
        r = e.record
        slug = f"{r.slug} [yellow](draft)[/]" if r.draft else r.slug
        table.add_row(
            str(e.position),
            slug,
            r.title,
            str(r.weight),
            r.date.isoformat() if r.date else "",
            e.template,
        )
    console.print(table)


def recent_cmd(
    root: Annotated[
        Path | None,
        typer.Argument(help="Content root holding the 'day N' folders. Defaults to content.root."),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", min=1, help="Number of records to show."),
    ] = 10,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", help="Include draft records (preview mode)."),
    ] = False,
) -> None:
    """Show the most recently dated records across all collections."""
    cfg, content_root, settings = load_settings(root)
    corpus = scan_or_exit(content_root, settings)

    records = recent_records(corpus, limit=limit, include_drafts=drafts or cfg.content.include_drafts)
    if not records:
        console.print("[yellow]No records to show.[/]")
        raise typer.Exit(0)

    table = Table(title="Recent", title_justify="left", header_style="bold")
    table.add_column("Date", style="dim")
    table.add_column("Collection")
    table.add_column("Slug", style="bold")
    table.add_column("Title")
    for r in records:
        table.add_row(r.date.isoformat() if r.date else "—", r.collection_id, r.slug, r.title)
    console.print(table)

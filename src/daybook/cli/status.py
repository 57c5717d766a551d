"""daybook status command.

Shows a project overview: config, corpus summary (collections, visible
records, drafts, empty collections) and scan issues grouped by kind.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.panel import Panel
from rich.table import Table

from daybook.cli.common import console, load_settings, scan_or_exit
from daybook.config import DaybookConfig
from daybook.content.models import Corpus


def status_cmd(
    root: Annotated[
        Path | None,
        typer.Argument(help="Content root holding the 'day N' folders. Defaults to content.root."),
    ] = None,
) -> None:
    """Show corpus status: collections, drafts, and scan issues."""
    cfg, content_root, settings = load_settings(root)

    # ---- Panel 1: Project ----
    _show_project_panel(content_root, cfg)

    corpus = scan_or_exit(content_root, settings)

    # ---- Panel 2: Corpus ----
    _show_corpus_panel(corpus)

    # ---- Panel 3: Issues ----
    _show_issues_panel(corpus)


# ---------------------------------------------------------------------------
# Panel renderers
# ---------------------------------------------------------------------------


def _show_project_panel(content_root: Path, cfg: DaybookConfig) -> None:
    lines = [
        f"Content root:  [bold]{content_root}[/]",
        f"Template:      {cfg.content.default_template}",
        f"Drafts:        {'included' if cfg.content.include_drafts else 'hidden'}",
        f"Workers:       {cfg.scan.workers}  (timeout {cfg.scan.read_timeout:g}s)",
    ]
    console.print(Panel("\n".join(lines), title="[bold]Project[/]", expand=False))


def _show_corpus_panel(corpus: Corpus) -> None:
    visible = len(corpus.records())
    drafts = len(corpus.drafts())
    empty = [c.collection_id for c in corpus.collections if c.is_empty]

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Collection", style="bold")
    table.add_column("Records", justify="right")
    table.add_column("Note", style="dim")

    for c in corpus.collections:
        n_visible = len(c.visible())
        note_parts: list[str] = []
        if c.drafts:
            note_parts.append(f"{len(c.drafts)} draft")
        if c.ambiguous:
            note_parts.append("ambiguous ordinals: " + ", ".join(str(i) for i in c.ambiguous))
        if c.is_empty:
            note_parts.append("no content yet")
        table.add_row(c.collection_id, str(n_visible), "; ".join(note_parts))

    summary = (
        f"Collections: [bold]{len(corpus.collections)}[/]  |  "
        f"Visible: [bold]{visible}[/]  |  "
        f"Drafts: [bold]{drafts}[/]  |  "
        f"Empty: [bold]{len(empty)}[/]"
    )
    console.print(Panel(table, title="[bold]Corpus[/]", expand=False))
    console.print(f"  {summary}")


def _show_issues_panel(corpus: Corpus) -> None:
    report = corpus.report
    if not report.issues:
        console.print(
            Panel(
                f"[green]✓[/] {report.files_seen} files scanned, no issues.",
                title="[bold]Issues[/]",
                expand=False,
            )
        )
        return

    lines = [f"{report.files_seen} files scanned, {report.records_parsed} parsed."]
    for kind, count in report.by_kind().items():
        lines.append(f"  {kind}: [bold]{count}[/]")
    lines.append("  Run:  daybook check  for details.")
    console.print(Panel("\n".join(lines), title="[bold]Issues[/]", expand=False))

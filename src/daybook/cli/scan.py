"""daybook scan / daybook check.

  daybook scan [ROOT]            write the ordered corpus as JSON (default corpus.json)
  daybook scan --stdout          print the JSON instead of writing a file
  daybook scan --drafts          include draft records (preview mode)
  daybook check [ROOT]           list every per-file issue; exit 1 on errors

Per-file problems are printed as warnings and never stop the scan. The
exit code is non-zero only when no content could be read at all (or, with
--strict, when any file had to be left out).
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from daybook.cli.common import console, load_settings, print_issues, scan_or_exit
from daybook.cli.errors import err_output_path_unsafe, warn_strict_failed
from daybook.content.export import check_overwrite, dumps_corpus, write_output


def _validate_output_path(output: Path) -> Path:
    """Relative paths must stay inside the CWD; absolute paths are taken as-is."""
    if output.is_absolute():
        return output.resolve()
    base = Path.cwd().resolve()
    resolved = (base / output).resolve()
    try:
        resolved.relative_to(base)
    except ValueError:
        console.print(err_output_path_unsafe(str(output)))
        raise typer.Exit(1)
    return resolved


def scan_cmd(
    root: Annotated[
        Path | None,
        typer.Argument(help="Content root holding the 'day N' folders. Defaults to content.root."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="JSON output path. Overrides output.path in daybook.yaml."),
    ] = None,
    stdout: Annotated[
        bool,
        typer.Option("--stdout", help="Print the JSON to stdout instead of writing a file."),
    ] = False,
    drafts: Annotated[
        bool,
        typer.Option("--drafts", help="Include draft records (preview mode)."),
    ] = False,
    body: Annotated[
        bool,
        typer.Option("--body", help="Embed each record's Markdown body in the JSON."),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Exit 1 if any file had to be left out of the corpus."),
    ] = False,
    workers: Annotated[
        int | None,
        typer.Option("--workers", help="Parallel file readers. Overrides scan.workers."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Overwrite an existing output file without asking."),
    ] = False,
) -> None:
    """Scan the content tree and export the ordered corpus as JSON."""
    cfg, content_root, settings = load_settings(root, workers)
    include_drafts = drafts or cfg.content.include_drafts

    corpus = scan_or_exit(content_root, settings)
    print_issues(corpus.report)

    payload = dumps_corpus(
        corpus,
        include_drafts=include_drafts,
        include_body=body,
        indent=cfg.output.indent or None,
    )

    if stdout:
        typer.echo(payload, nl=False)
    else:
        output_path = _validate_output_path(output if output is not None else Path(cfg.output.path))
        if not check_overwrite(output_path, yes=yes):
            console.print("  [dim]Cancelled.[/]")
            raise typer.Exit(0)
        write_output(output_path, payload)
        visible = len(corpus.records(include_drafts))
        console.print(
            f"[bold green]✓[/] {len(corpus.collections)} collections, "
            f"{visible} records → [bold]{output_path.name}[/]"
        )

    if strict and corpus.report.has_errors:
        console.print(warn_strict_failed(len(corpus.report.errors)))
        raise typer.Exit(1)


def check_cmd(
    root: Annotated[
        Path | None,
        typer.Argument(help="Content root holding the 'day N' folders. Defaults to content.root."),
    ] = None,
) -> None:
    """Validate every content file and list all issues."""
    _, content_root, settings = load_settings(root)
    corpus = scan_or_exit(content_root, settings)
    report = corpus.report

    if not report.issues:
        console.print(f"[green]✓[/] {report.files_seen} files, no issues.")
        return

    print_issues(report)
    console.print(
        f"\n  {report.files_seen} files: "
        f"[red]{len(report.errors)} errors[/], [yellow]{len(report.warnings)} warnings[/]"
    )
    if report.has_errors:
        raise typer.Exit(1)

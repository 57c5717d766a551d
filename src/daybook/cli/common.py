"""Shared CLI plumbing: config → settings → scan, with friendly fatal errors."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from daybook.cli.errors import err_config, err_no_content, err_root_missing, fmt_issue
from daybook.config import ConfigError, DaybookConfig, load_config
from daybook.content.errors import CorpusUnavailable
from daybook.content.models import Corpus, ScanReport
from daybook.content.scanner import ScanSettings, scan_corpus

console = Console()
# Per-file issues go to stderr so --stdout JSON stays clean.
err_console = Console(stderr=True)


def load_settings(
    root: Path | None,
    workers: int | None = None,
) -> tuple[DaybookConfig, Path, ScanSettings]:
    """Resolve config layers plus CLI flags; exit 1 on invalid config."""
    try:
        cfg = load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)

    if workers is not None:
        if workers < 1:
            console.print(err_config(f"--workers must be >= 1, got {workers}"))
            raise typer.Exit(1)
        cfg.scan.workers = workers

    content_root = root if root is not None else Path(cfg.content.root)
    return cfg, content_root, ScanSettings.from_config(cfg)


def scan_or_exit(root: Path, settings: ScanSettings) -> Corpus:
    """Scan *root*; the only non-zero exit is a fatal ``CorpusUnavailable``."""
    try:
        return scan_corpus(root, settings)
    except CorpusUnavailable as exc:
        if not root.is_dir():
            console.print(err_root_missing(str(root)))
        else:
            console.print(err_no_content(str(root), exc.message))
        raise typer.Exit(1)


def print_issues(report: ScanReport, quiet: bool = False) -> None:
    if quiet:
        return
    for issue in report.issues:
        err_console.print(fmt_issue(issue))

"""daybook init — scaffold a project.

Creates:
  daybook.yaml             — project config (content root, scan settings, output)
  <root>/day 1/            — first collection folder, only with --example
  <root>/day 1/chapter-1.md
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated

import typer

from daybook.cli.common import console
from daybook.config import PROJECT_CONFIG_NAME, ensure_project_config

_DEFAULT_PROJECT_DIR = Path(".")

_EXAMPLE_CHAPTER = """\
+++
title = "Getting started"
description = "First chapter of the first day."
date = {today}
draft = true
weight = 0
template = "page.html"
+++

Write your chapter here.
"""


def init_cmd(
    project_dir: Annotated[
        Path,
        typer.Argument(help="Directory to initialize. Defaults to current directory."),
    ] = _DEFAULT_PROJECT_DIR,
    content_root: Annotated[
        str,
        typer.Option("--root", help="Content root, relative to the project directory."),
    ] = ".",
    example: Annotated[
        bool,
        typer.Option("--example", help="Also create 'day 1/chapter-1.md' as a draft."),
    ] = False,
) -> None:
    """Initialize a daybook project (writes daybook.yaml)."""
    project_dir = project_dir.resolve()

    config_path = project_dir / PROJECT_CONFIG_NAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/]  {config_path} already exists — left unchanged.")
    else:
        ensure_project_config(project_dir, content_root)
        console.print(f"  [green]✓[/] {PROJECT_CONFIG_NAME}")

    if example:
        _create_example(project_dir / content_root)

    console.print("\nNext steps:")
    console.print("  1. Add chapters as '<root>/day N/chapter-M.md'")
    console.print("  2. daybook check      (validate frontmatter)")
    console.print("  3. daybook list       (review order)")
    console.print("  4. daybook scan       (export corpus.json)")


def _create_example(root: Path) -> None:
    target = root / "day 1" / "chapter-1.md"
    if target.exists():
        console.print(f"  [dim]↷ {target.name} exists — skipped[/]")
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(_EXAMPLE_CHAPTER.format(today=date.today().isoformat()), encoding="utf-8")
    console.print("  [green]✓[/] day 1/chapter-1.md")

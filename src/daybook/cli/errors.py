"""daybook rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from daybook.cli.errors import err_no_content
    console.print(err_no_content("content/"))
    raise typer.Exit(1)
"""

from __future__ import annotations

from daybook.content.models import Issue

# Suggested fix per issue kind, shown under each per-file warning.
_ISSUE_HINTS: dict[str, str] = {
    "UnrecognizedHeader": "Start the file with a '+++' (TOML) or '---' (YAML) frontmatter block.",
    "MalformedHeader": "Fix the frontmatter syntax so it decodes to key/value pairs.",
    "MissingField": "Add the field to the frontmatter block.",
    "InvalidField": "Correct the value; the default was used instead.",
    "UnindexableFilename": "Rename the file with an ordinal, e.g. chapter-3.md.",
    "AmbiguousOrdering": "Give one of the files a different ordinal or an explicit weight.",
    "ReadTimeout": "Check the file system, or raise scan.read_timeout in daybook.yaml.",
    "ReadFailure": "Check file permissions.",
}


def err_root_missing(root: str) -> str:
    """Content root does not exist or is not a directory."""
    return (
        f"[red]Error:[/] Content root not found: '{root}'\n"
        "  Pass the directory holding your 'day N' folders:  daybook scan <ROOT>\n"
        "  or set content.root in daybook.yaml."
    )


def err_no_content(root: str, detail: str = "") -> str:
    """No readable content files under the root."""
    reason = f"  {detail}\n" if detail else ""
    return (
        f"[red]Error:[/] No readable content under '{root}'.\n"
        f"{reason}"
        "  Checklist:\n"
        "    [ ] Create a collection folder, e.g. 'day 1/'\n"
        "    [ ] Add a chapter file with frontmatter, e.g. 'day 1/chapter-1.md'"
    )


def err_config(message: str) -> str:
    """daybook.yaml (or an env override) holds an invalid value."""
    return (
        f"[red]Error:[/] Invalid configuration: {message}\n"
        "  Fix daybook.yaml or the DAYBOOK_* environment variables.\n"
        "  Run:  daybook init  to write a fresh daybook.yaml."
    )


def err_output_path_unsafe(path: str) -> str:
    """--output path fails security validation."""
    return (
        f"[red]Error:[/] Output path is not allowed: '{path}'\n"
        "  Use a path within the current working directory."
    )


def err_collection_not_found(collection_id: str, known: list[str]) -> str:
    known_list = ", ".join(known) if known else "(none)"
    return (
        f"[red]Error:[/] Collection '{collection_id}' not found.\n"
        f"  Known collections: {known_list}"
    )


def fmt_issue(issue: Issue) -> str:
    """One issue as a rich-markup line, with a fix hint."""
    colour = "red" if issue.is_error else "yellow"
    label = "Error" if issue.is_error else "Warning"
    where = f"{issue.path}: " if issue.path else ""
    line = f"[{colour}]{label}:[/] [bold]{issue.kind}[/] {where}{issue.message}"
    hint = _ISSUE_HINTS.get(issue.kind)
    if hint:
        line += f"\n  [dim]{hint}[/]"
    return line


def warn_strict_failed(error_count: int) -> str:
    return (
        f"[red]✗[/] {error_count} file(s) could not be included (--strict).\n"
        "  Run:  daybook check  to list them."
    )

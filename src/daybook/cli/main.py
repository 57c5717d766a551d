"""daybook CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from daybook.cli.init import init_cmd
from daybook.cli.listing import list_cmd, recent_cmd
from daybook.cli.scan import check_cmd, scan_cmd
from daybook.cli.status import status_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("daybook")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"daybook {_version()}")
        raise typer.Exit()


app = typer.Typer(
    name="daybook",
    help=(
        "daybook — collect, order and export 'day N/chapter-M.md' content.\n\n"
        "  daybook list   Review the navigable order of every collection.\n"
        "  daybook scan   Export the ordered corpus as JSON for a renderer."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging from the scanner."),
    ] = False,
) -> None:
    """daybook — content collection & ordering engine."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


app.command("init")(init_cmd)
app.command("scan")(scan_cmd)
app.command("check")(check_cmd)
app.command("list")(list_cmd)
app.command("recent")(recent_cmd)
app.command("status")(status_cmd)


@app.command("version")
def version_cmd() -> None:
    """Show the installed daybook version."""
    typer.echo(f"daybook {_version()}")


if __name__ == "__main__":
    app()

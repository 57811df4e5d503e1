#!/usr/bin/env python3
"""
Main CLI entry point for repobrowse
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from repobrowse import __version__
from repobrowse.backend import GitBackend
from repobrowse.config.constants import PUBLIC_URL_ENV_VAR
from repobrowse.config.ui_config import resolve_ui_config, set_public_url
from repobrowse.exceptions import RepoBrowseError
from repobrowse.ui.app import RepoBrowserApp
from repobrowse.ui.context import Context
from repobrowse.ui.panes import default_panes
from repobrowse.ui.repo_view import RepoView
from repobrowse.utils.logging_utils import setup_tui_logging

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    help="Browse a git repository in the terminal.",
    no_args_is_help=False,
)


@app.command()
def browse(
    path: Path = typer.Argument(
        Path("."), help="Repository (or any directory inside one) to browse"
    ),
    public_url: Optional[str] = typer.Option(
        None,
        "--public-url",
        envvar=PUBLIC_URL_ENV_VAR,
        help="Base URL used for the clone command in the header",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Open the repository browser."""
    setup_tui_logging(verbose=verbose)

    try:
        config = resolve_ui_config(public_url)
        backend = GitBackend()
        repo = backend.open_repository(path)
    except RepoBrowseError as e:
        logger.error(f"Cannot browse {path}: {e}")
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e

    ctx = Context(backend=backend, config=config)
    view = RepoView(ctx, default_panes(ctx))
    RepoBrowserApp(ctx, repo, view).run()


@app.command("set-url")
def set_url(
    url: str = typer.Argument(..., help="Base URL for clone commands, e.g. ssh://git.example.com"),
):
    """Remember the public URL shown in the clone command."""
    set_public_url(url)
    console.print(f"✅ Public URL set to {url}", style="green")


@app.command()
def version():
    """Show repobrowse version"""
    typer.echo(f"repobrowse version {__version__}")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()

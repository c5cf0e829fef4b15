# patchspace/cli.py
import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from .services.logging import setup_logging
from .services.ai_client import AnthropicChatClient
from .config.loader import get_config
from .core.change_parser import parse_file_changes
from .core.chat import ChatSession
from .core.ingestion import read_directory
from .core.models import ProposedChange
from .core.session import WorkspaceSession
from .core.tree_builder import render_tree
from . import __version__

app = typer.Typer(help="Patchspace - load a project folder and apply AI-proposed multi-file changes in memory.")

def version_callback(value: bool):
    if value:
        typer.echo(f"Patchspace Version: {__version__}")
        raise typer.Exit()

@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """ Main callback to set up logging """
    setup_logging(level="DEBUG" if verbose else "WARNING", verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose

def _load_workspace(repo: Path) -> WorkspaceSession:
    config = get_config()
    session = WorkspaceSession(ignore_patterns=config.ignore_patterns)
    try:
        entries = asyncio.run(read_directory(repo, config.ignore_patterns))
    except ValueError as e:
        logger.error(f"Load Error: {e}")
        raise typer.Exit(code=1)
    session.load_project(entries)
    return session

def _describe_changes(changes: List[ProposedChange]) -> None:
    for number, change in enumerate(changes, start=1):
        kind = "new" if change.is_new else "update"
        typer.echo(f"{number}. [{kind}] {change.filename} ({change.language}, {len(change.content)} chars)")

@app.command()
def tree(
    repo: Path = typer.Argument(..., help="Project folder to load.", exists=True, file_okay=False, dir_okay=True, readable=True, resolve_path=True),
):
    """Loads a folder and prints its file tree."""
    session = _load_workspace(repo)
    typer.echo(render_tree(session.tree))
    typer.echo(session.file_count_label())

@app.command()
def parse(
    response: Path = typer.Argument(..., help="Text file holding an AI response.", exists=True, file_okay=True, dir_okay=False, readable=True),
):
    """Lists the file changes proposed in an AI response."""
    changes = parse_file_changes(response.read_text(encoding="utf-8"))
    if not changes:
        typer.echo("No file changes found.")
        return
    _describe_changes(changes)

@app.command()
def apply(
    repo: Path = typer.Argument(..., help="Project folder to load.", exists=True, file_okay=False, dir_okay=True, readable=True, resolve_path=True),
    response: Path = typer.Argument(..., help="Text file holding an AI response.", exists=True, file_okay=True, dir_okay=False, readable=True),
    show_tree: bool = typer.Option(False, "--tree", help="Print the resulting file tree."),
):
    """
    Applies every change in an AI response to the loaded project, in order.
    Changes are applied in memory only; nothing is written back to disk.
    """
    session = _load_workspace(repo)
    changes = parse_file_changes(response.read_text(encoding="utf-8"))
    if not changes:
        typer.echo("No file changes found.")
        raise typer.Exit(code=1)

    for change, result in zip(changes, session.apply_changes(changes)):
        action = "created" if result.created else "updated"
        strategy = result.resolution.strategy if result.resolution else "?"
        line = f"{action}: {result.path}  <- {change.filename} [{strategy}]"
        if result.resolution and result.resolution.is_ambiguous:
            line += f" (ambiguous: {', '.join(result.resolution.candidates)})"
        typer.echo(line)

    if show_tree:
        typer.echo(render_tree(session.tree))

@app.command()
def ask(
    repo: Path = typer.Argument(..., help="Project folder to load.", exists=True, file_okay=False, dir_okay=True, readable=True, resolve_path=True),
    message: str = typer.Argument(..., help="What you want changed."),
):
    """Sends one request with the whole project as context and prints the reply and its proposed changes."""
    config = get_config()
    session = _load_workspace(repo)
    chat = ChatSession(session, AnthropicChatClient(config), config)
    reply = asyncio.run(chat.send_message(message))
    typer.echo(reply.text)
    if reply.failed:
        raise typer.Exit(code=1)
    if reply.changes:
        typer.echo("")
        typer.echo(f"Proposed changes ({len(reply.changes)}):")
        _describe_changes(reply.changes)

if __name__ == "__main__":
    app()

"""
Main CLI application entry point.

This module contains the main Typer application and command handlers
for Prompta.
"""

import logging
from typing import Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from prompta import VERSION
from prompta.cli.commands import PromptCommands
from prompta.config.settings import PromptaSettings, load_settings
from prompta.core.errors import ConfigurationError, PromptaError
from prompta.prompts.store import PromptStore
from prompta.services.clipboard import Clipboard
from prompta.services.editor import ExternalEditor, resolve_editor
from prompta.ui.interaction import RichInteraction
from prompta.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Create the main Typer application
app = typer.Typer(
    name="prompta",
    help="A CLI tool for managing prompts for LLMs",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Rich console for output
console = Console()


def version_callback(value: bool) -> None:
    """Display version information and exit."""
    if value:
        console.print(f"[bold blue]Prompta[/bold blue] version [green]{VERSION}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Prompta - a personal prompt library.

    Create reusable prompts with {{parameter}} placeholders, fill them in
    and copy the result to the clipboard.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    setup_logging(settings.effective_log_level)
    logger.debug(f"Using prompt store {settings.store_path}")
    ctx.obj = settings


def build_commands(settings: PromptaSettings) -> PromptCommands:
    """Construct the command flows and their collaborators for one invocation."""
    return PromptCommands(
        store=PromptStore(settings.store_path),
        interaction=RichInteraction(console),
        editor=ExternalEditor(resolve_editor(settings.editor)),
        clipboard=Clipboard(),
        console=console,
    )


def _run(ctx: typer.Context, verb: str, action: Callable[[PromptCommands], T]) -> T:
    """Run a command flow, reporting failures the same way for every command."""
    try:
        return action(build_commands(ctx.obj))
    except PromptaError as e:
        logger.debug(f"{verb} failed: {e.to_dict()}")
        console.print(f"[red]Error {verb} prompt:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except EOFError:
        console.print(f"\n[red]Error {verb} prompt:[/red] input ended unexpectedly")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        console.print("\n[dim]Aborted.[/dim]")
        raise typer.Exit(130)


@app.command("create")
def create_command(ctx: typer.Context) -> None:
    """Create a new prompt."""
    prompt = _run(ctx, "creating", lambda commands: commands.create())
    if prompt is not None:
        console.print("[green]✅ Prompt created successfully![/green]")


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List all saved prompts."""
    _run(ctx, "listing", lambda commands: commands.list_prompts())


@app.command("edit")
def edit_command(ctx: typer.Context) -> None:
    """Edit an existing prompt."""
    prompt = _run(ctx, "editing", lambda commands: commands.edit())
    if prompt is not None:
        console.print("[green]✅ Prompt updated successfully![/green]")


@app.command("run")
def run_command(ctx: typer.Context) -> None:
    """Execute a prompt with parameters."""
    _run(ctx, "executing", lambda commands: commands.run())


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()

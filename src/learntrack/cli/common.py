"""
Shared CLI helpers: logging setup, error rendering, store construction.
"""

import asyncio
import logging
import sys
import traceback
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from learntrack.core.config import LearntrackConfig, load_config
from learntrack.core.dashboard import DashboardError, DashboardStore, ProjectStatus
from learntrack.core.remote.provision import create_remote

T = TypeVar("T")

console = Console()

# Global debug flag
_debug_mode = False

STATUS_STYLES = {
    ProjectStatus.NOT_STARTED: "dim",
    ProjectStatus.IN_PROGRESS: "yellow",
    ProjectStatus.COMPLETED: "green",
}


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for learntrack commands.

    Args:
        debug: If True, enable DEBUG level logging and full tracebacks
    """
    global _debug_mode
    _debug_mode = debug

    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def handle_error(error: Exception, command_name: str) -> None:
    """
    Display an error in a panel.

    Dashboard errors show their message and context; anything else is
    reported as unexpected.

    Args:
        error: The exception that was raised
        command_name: Name of the command that failed
    """
    error_text = Text()
    if isinstance(error, DashboardError):
        error_text.append("Error: ", style="bold red")
        error_text.append(str(error))
        if error.context:
            error_text.append("\n\nContext:\n", style="dim")
            for key, value in error.context.items():
                error_text.append(f"  {key}: ", style="cyan")
                error_text.append(f"{value}\n", style="white")
        title = "[bold red]Error[/bold red]"
    else:
        error_text.append("Error in ", style="bold red")
        error_text.append(command_name, style="bold yellow")
        error_text.append(": ", style="bold red")
        error_text.append(str(error))
        title = "[bold red]Unexpected Error[/bold red]"

    console.print()
    console.print(Panel(error_text, title=title, border_style="red", expand=False))

    if _debug_mode:
        console.print("\n[dim]Full traceback:[/dim]")
        console.print(traceback.format_exc())
    else:
        console.print("[dim]Run with --debug for full traceback[/dim]")
    console.print()


def get_config() -> LearntrackConfig:
    return load_config()


async def open_store(require_remote: bool = False) -> DashboardStore:
    """
    Build a dashboard store from configuration and load its data.

    Args:
        require_remote: Fail unless data was loaded from a remote store.
            Mutating commands need this, since local-only changes are lost
            when the process exits.

    Raises:
        DashboardError: If a remote is required but unavailable
    """
    store = DashboardStore(remote=create_remote(get_config()))
    await store.load_initial_data()
    if require_remote and not store.using_remote:
        if store.remote is None:
            raise DashboardError(
                "No remote store configured; changes would not be saved. "
                "Set LEARNTRACK_FIRESTORE_PROJECT or firestore.project_id in .learntrack.json."
            )
        raise DashboardError(
            "Remote store unreachable; changes would not be saved.",
            backend=store.remote.backend_name,
        )
    return store


def run_command(command_name: str, func: Callable[[], Awaitable[T]]) -> T:
    """
    Run an async command body from Typer's sync context.

    Errors are rendered with handle_error and turned into exit code 1.
    """
    try:
        return asyncio.run(func())
    except typer.Exit:
        raise
    except Exception as e:
        handle_error(e, command_name)
        raise typer.Exit(1)


def status_text(status: ProjectStatus) -> Text:
    return Text(status.value, style=STATUS_STYLES.get(status, "white"))


def progress_text(completed: int, total: int) -> Text:
    """Render 'completed/total (pct%)'."""
    if total == 0:
        return Text("-", style="dim")
    pct = completed * 100 // total
    style = "green" if completed == total else "yellow" if completed else "dim"
    return Text(f"{completed}/{total} ({pct}%)", style=style)

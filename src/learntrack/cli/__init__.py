"""
Learntrack CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer

from learntrack import __version__
from learntrack.cli import browse, data, note, project, topic
from learntrack.cli.common import console, setup_logging
from learntrack.core.config.env import load_layered_env

PANEL_VIEW = "View Progress"
PANEL_EDIT = "Edit Your Learning Tree"
PANEL_DATA = "Data"

app = typer.Typer(
    name="learntrack",
    help="Track learning topics, projects and notes",
    no_args_is_help=True,
    add_completion=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"learntrack {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Learntrack - personal learning tracker.

    Organise learning into topics, each holding projects with a status and
    date range, each project holding dated notes. Data lives in Firestore
    when configured.

    Quick Start:
        learntrack topic add "Data Structures"
        learntrack project add data-structures heaps --title "Binary heaps"
        learntrack note add heaps "Implemented sift-down"
        learntrack project status heaps completed
        learntrack topics
    """
    load_layered_env()
    setup_logging(debug)


app.command(name="topics", rich_help_panel=PANEL_VIEW)(browse.topics)
app.command(name="show", rich_help_panel=PANEL_VIEW)(browse.show)
app.command(name="notes", rich_help_panel=PANEL_VIEW)(browse.notes)
app.command(name="doctor", rich_help_panel=PANEL_VIEW)(browse.doctor)

app.add_typer(topic.app, name="topic", rich_help_panel=PANEL_EDIT)
app.add_typer(project.app, name="project", rich_help_panel=PANEL_EDIT)
app.add_typer(note.app, name="note", rich_help_panel=PANEL_EDIT)

app.command(name="seed", rich_help_panel=PANEL_DATA)(data.seed)
app.command(name="export", rich_help_panel=PANEL_DATA)(data.export)


def cli_main() -> None:
    """Main CLI entry point."""
    app()


__all__ = ["app", "cli_main"]

"""
Learntrack CLI - read-only views of the dashboard.

Commands: topics, show, notes, doctor.
"""

from typing import Annotated

import typer
from rich.table import Table
from rich.text import Text

from learntrack.core.dashboard import DashboardStore, TopicNotFoundError
from learntrack.core.dashboard.exceptions import ProjectNotFoundError
from learntrack.utils.dates import format_date

from .common import console, get_config, open_store, progress_text, run_command, status_text


def _date_format() -> str | None:
    return get_config().display.date_format


def topics() -> None:
    """
    List topics with their progress.

    Examples:
        learntrack topics
    """

    async def _run() -> DashboardStore:
        return await open_store()

    store = run_command("topics", _run)

    if not store.topics:
        console.print("[dim]No topics yet. Create one with 'learntrack topic add NAME'.[/dim]")
        return

    table = Table(title="Topics", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Projects", justify="right")
    table.add_column("Progress", justify="right")

    for topic in store.topics:
        completed, total = store.get_topic_progress(topic.id)
        table.add_row(topic.id, topic.name, str(total), progress_text(completed, total))

    console.print(table)
    completed, total = store.get_overall_progress()
    summary = Text("Overall: ", style="dim")
    summary.append_text(progress_text(completed, total))
    if not store.using_remote:
        summary.append("  (local only)", style="dim")
    console.print(summary)


def show(
    topic_id: Annotated[str, typer.Argument(help="Topic ID")],
) -> None:
    """
    Show the projects of a topic, newest first.

    Examples:
        learntrack show data-structures
    """

    async def _run() -> DashboardStore:
        store = await open_store()
        if store.get_topic_by_id(topic_id) is None:
            raise TopicNotFoundError(topic_id)
        return store

    store = run_command("show", _run)
    topic = store.get_topic_by_id(topic_id)
    assert topic is not None
    fmt = _date_format()

    table = Table(
        title=f"{topic.name} ({topic.id})",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", overflow="fold")
    table.add_column("Status")
    table.add_column("Start", width=13)
    table.add_column("End", width=13)
    table.add_column("Notes", justify="right")

    for project in store.get_topic_projects(topic_id):
        table.add_row(
            project.id,
            project.title,
            status_text(project.status),
            format_date(project.start_date, fmt),
            format_date(project.end_date, fmt) or "[dim]-[/dim]",
            str(len(project.notes)),
        )

    console.print(table)
    completed, total = store.get_topic_progress(topic_id)
    summary = Text("Progress: ", style="dim")
    summary.append_text(progress_text(completed, total))
    console.print(summary)


def notes(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
) -> None:
    """
    Show the notes of a project with their index.

    The index is what 'note edit' and 'note delete' expect.

    Examples:
        learntrack notes heaps
    """

    async def _run() -> DashboardStore:
        store = await open_store()
        if store.get_project_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)
        return store

    store = run_command("notes", _run)
    project = store.get_project_by_id(project_id)
    assert project is not None
    fmt = _date_format()

    console.print(f"[bold]{project.title or project.id}[/bold]  ", status_text(project.status))
    if project.description:
        console.print(f"[dim]{project.description}[/dim]")

    project_notes = store.get_project_notes(project_id)
    if not project_notes:
        console.print("[dim]No notes.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Date", width=13)
    table.add_column("Content", overflow="fold")
    for index, note in enumerate(project_notes):
        table.add_row(str(index), format_date(note.date, fmt), note.content)
    console.print(table)


def doctor() -> None:
    """
    Check the remote connection and project index consistency.

    Examples:
        learntrack doctor
    """

    async def _run() -> DashboardStore:
        return await open_store()

    store = run_command("doctor", _run)

    if store.remote is None:
        console.print("[yellow]![/yellow] No remote store configured (local only)")
    elif store.using_remote:
        console.print(f"[green]✓[/green] Loaded from {store.remote.backend_name}")
    else:
        console.print(
            f"[red]✗[/red] {store.remote.backend_name} unreachable, fell back to empty state"
        )

    problems = store.check_index()
    if problems:
        for problem in problems:
            console.print(f"[red]✗[/red] {problem}")
        raise typer.Exit(1)
    console.print(
        f"[green]✓[/green] Index consistent: {len(store.topics)} topics, "
        f"{len(store.project_index)} projects"
    )

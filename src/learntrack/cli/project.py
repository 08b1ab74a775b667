"""
Learntrack CLI - project commands.
"""

from typing import Annotated, Any, Optional

import typer

from learntrack.core.dashboard import Project, ProjectPatch, ProjectStatus
from learntrack.utils.dates import today_iso

from .common import console, open_store, run_command, status_text

app = typer.Typer(
    name="project",
    help="Add, update and remove projects",
    no_args_is_help=True,
)


@app.command("add")
def add(
    topic_id: Annotated[str, typer.Argument(help="Topic ID (created if missing)")],
    project_id: Annotated[str, typer.Argument(help="Project ID, unique across all topics")],
    title: Annotated[str, typer.Option("--title", "-t", help="Project title")] = "",
    description: Annotated[
        str, typer.Option("--description", "-d", help="Project description")
    ] = "",
    status: Annotated[
        ProjectStatus, typer.Option("--status", "-s", help="Initial status")
    ] = ProjectStatus.NOT_STARTED,
    start: Annotated[
        Optional[str], typer.Option("--start", help="Start date (YYYY-MM-DD, default today)")
    ] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date (YYYY-MM-DD)")] = None,
) -> None:
    """
    Add a project to a topic.

    Examples:
        learntrack project add data-structures heaps --title "Binary heaps"
        learntrack project add ml mnist -s in-progress --start 2024-03-01
    """
    project = Project(
        id=project_id,
        title=title or project_id,
        description=description,
        status=status,
        start_date=start or today_iso(),
        end_date=end,
    )

    async def _run() -> Project:
        store = await open_store(require_remote=True)
        return await store.add_project(topic_id, project)

    added = run_command("project add", _run)
    console.print(f"[green]Added project[/green] [cyan]{added.id}[/cyan] to {topic_id}")


@app.command("update")
def update(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    description: Annotated[Optional[str], typer.Option("--description", "-d")] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Start date")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="End date")] = None,
    clear_end: Annotated[
        bool, typer.Option("--clear-end", help="Remove the end date")
    ] = False,
) -> None:
    """
    Update a project's title, description or dates.

    Examples:
        learntrack project update heaps --title "Heaps and priority queues"
        learntrack project update heaps --clear-end
    """
    fields: dict[str, Any] = {}
    if title is not None:
        fields["title"] = title
    if description is not None:
        fields["description"] = description
    if start is not None:
        fields["start_date"] = start
    if clear_end:
        fields["end_date"] = None
    elif end is not None:
        fields["end_date"] = end

    if not fields:
        console.print("[yellow]Nothing to update.[/yellow] Pass at least one option.")
        raise typer.Exit(1)

    async def _run() -> Project:
        store = await open_store(require_remote=True)
        return await store.update_project(project_id, ProjectPatch(**fields))

    project = run_command("project update", _run)
    console.print(f"[green]Updated project[/green] [cyan]{project.id}[/cyan]")


@app.command("status")
def set_status(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    status: Annotated[ProjectStatus, typer.Argument(help="New status")],
) -> None:
    """
    Set a project's status.

    Examples:
        learntrack project status heaps completed
    """

    async def _run() -> Project:
        store = await open_store(require_remote=True)
        return await store.update_project_status(project_id, status)

    project = run_command("project status", _run)
    console.print(
        f"[green]Project[/green] [cyan]{project.id}[/cyan] is now ", status_text(project.status)
    )


@app.command("remove")
def remove(
    topic_id: Annotated[str, typer.Argument(help="Topic ID owning the project")],
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """
    Remove a project and its notes.

    Examples:
        learntrack project remove data-structures heaps --yes
    """
    if not yes:
        typer.confirm(f"Remove project '{project_id}' from '{topic_id}'?", abort=True)

    async def _run() -> None:
        store = await open_store(require_remote=True)
        await store.remove_project(topic_id, project_id)

    run_command("project remove", _run)
    console.print(f"[green]Removed project[/green] [cyan]{project_id}[/cyan]")

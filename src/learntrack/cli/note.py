"""
Learntrack CLI - note commands.

Notes are addressed by their position in the project's note list, as
shown by 'learntrack notes PROJECT_ID'.
"""

from typing import Annotated, Optional

import typer

from learntrack.core.dashboard import Note
from learntrack.utils.dates import today_iso

from .common import console, open_store, run_command

app = typer.Typer(
    name="note",
    help="Add, edit and delete project notes",
    no_args_is_help=True,
)


@app.command("add")
def add(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    content: Annotated[str, typer.Argument(help="Note text")],
    date: Annotated[
        Optional[str], typer.Option("--date", help="Note date (YYYY-MM-DD, default today)")
    ] = None,
) -> None:
    """
    Add a note to a project.

    Examples:
        learntrack note add heaps "Implemented sift-down"
    """
    note = Note(date=date or today_iso(), content=content)

    async def _run() -> Note:
        store = await open_store(require_remote=True)
        return await store.add_note(project_id, note)

    run_command("note add", _run)
    console.print(f"[green]Added note to[/green] [cyan]{project_id}[/cyan]")


@app.command("edit")
def edit(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    index: Annotated[int, typer.Argument(help="Note index (see 'learntrack notes')")],
    content: Annotated[str, typer.Argument(help="New note text")],
    date: Annotated[
        Optional[str], typer.Option("--date", help="New date (default: keep current)")
    ] = None,
) -> None:
    """
    Replace the text (and optionally the date) of a note.

    Examples:
        learntrack note edit heaps 0 "Implemented sift-down and sift-up"
    """

    async def _run() -> Note:
        store = await open_store(require_remote=True)
        current = store.get_project_notes(project_id)
        current_date = current[index].date if 0 <= index < len(current) else ""
        return await store.update_note(
            project_id, index, Note(date=date or current_date, content=content)
        )

    run_command("note edit", _run)
    console.print(f"[green]Updated note {index} of[/green] [cyan]{project_id}[/cyan]")


@app.command("delete")
def delete(
    project_id: Annotated[str, typer.Argument(help="Project ID")],
    index: Annotated[int, typer.Argument(help="Note index (see 'learntrack notes')")],
) -> None:
    """
    Delete a note.

    Examples:
        learntrack note delete heaps 0
    """

    async def _run() -> Note:
        store = await open_store(require_remote=True)
        return await store.delete_note(project_id, index)

    removed = run_command("note delete", _run)
    console.print(f"[green]Deleted note[/green] [dim]{removed.content[:60]}[/dim]")

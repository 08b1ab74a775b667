"""
Learntrack CLI - topic commands.
"""

from typing import Annotated

import typer

from learntrack.core.dashboard import Topic, TopicPatch

from .common import console, open_store, run_command

app = typer.Typer(
    name="topic",
    help="Create, rename and delete topics",
    no_args_is_help=True,
)


@app.command("add")
def add(
    name: Annotated[str, typer.Argument(help="Topic name, e.g. 'Data Structures'")],
) -> None:
    """
    Create a topic. Its ID is the lowercased name with spaces as hyphens.

    Examples:
        learntrack topic add "Data Structures"
    """

    async def _run() -> Topic:
        store = await open_store(require_remote=True)
        return await store.create_topic(name)

    topic = run_command("topic add", _run)
    console.print(f"[green]Created topic[/green] [cyan]{topic.id}[/cyan] ({topic.name})")


@app.command("rename")
def rename(
    topic_id: Annotated[str, typer.Argument(help="Topic ID")],
    name: Annotated[str, typer.Argument(help="New display name")],
) -> None:
    """
    Change a topic's display name. The ID stays the same.

    Examples:
        learntrack topic rename data-structures "Data Structures & Algorithms"
    """

    async def _run() -> Topic:
        store = await open_store(require_remote=True)
        return await store.update_topic(topic_id, TopicPatch(name=name))

    topic = run_command("topic rename", _run)
    console.print(f"[green]Renamed[/green] [cyan]{topic.id}[/cyan] to {topic.name}")


@app.command("delete")
def delete(
    topic_id: Annotated[str, typer.Argument(help="Topic ID")],
    yes: Annotated[
        bool, typer.Option("--yes", "-y", help="Skip confirmation")
    ] = False,
) -> None:
    """
    Delete a topic with all its projects and notes.

    Examples:
        learntrack topic delete data-structures --yes
    """
    if not yes:
        typer.confirm(f"Delete topic '{topic_id}' and all its projects?", abort=True)

    async def _run() -> None:
        store = await open_store(require_remote=True)
        await store.delete_topic(topic_id)

    run_command("topic delete", _run)
    console.print(f"[green]Deleted topic[/green] [cyan]{topic_id}[/cyan]")

"""
Learntrack CLI - seed and export.

The seed file format is the export format: a JSON object with a "topics"
list (a bare list is accepted too). Keys use camelCase as stored remotely:

    {"topics": [{"id": "ml", "name": "ML", "projects": [
        {"id": "mnist", "title": "MNIST", "status": "completed",
         "startDate": "2024-01-05", "endDate": null,
         "notes": [{"date": "2024-01-06", "content": "94% accuracy"}]}]}]}
"""

import json
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from pydantic import TypeAdapter

from learntrack.core.dashboard import DashboardError, DashboardStore, Topic
from learntrack.core.remote.backend import topics_collection
from learntrack.core.remote.provision import create_remote

from .common import console, get_config, open_store, run_command

_topics_adapter = TypeAdapter(list[Topic])


def load_topics_file(path: Path) -> list[Topic]:
    """
    Read and validate a seed file.

    Raises:
        ValueError: If the file is not a topics list or fails validation
    """
    with path.open(encoding="utf-8") as f:
        data: Any = json.load(f)
    if isinstance(data, dict):
        data = data.get("topics")
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of topics or an object with 'topics'")
    return _topics_adapter.validate_python(data)


def seed(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Topics JSON file"),
    ],
    force: Annotated[
        bool, typer.Option("--force", help="Seed even if the remote already has topics")
    ] = False,
) -> None:
    """
    Write a topics file to the remote store.

    Examples:
        learntrack seed sample-topics.json
    """

    async def _run() -> int:
        topics = load_topics_file(file)
        remote = create_remote(get_config())
        if remote is None:
            raise DashboardError("No remote store configured; nothing to seed.")
        if not force and await remote.list_documents(topics_collection()):
            raise DashboardError(
                "Remote store already has topics. Use --force to seed anyway.",
                backend=remote.backend_name,
            )
        return await DashboardStore().seed_remote(remote, topics)

    written = run_command("seed", _run)
    console.print(f"[green]Seeded[/green] {written} documents")


def export(
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="Write to file instead of stdout")
    ] = None,
) -> None:
    """
    Export all topics, projects and notes as JSON.

    Examples:
        learntrack export -o backup.json
    """

    async def _run() -> DashboardStore:
        return await open_store()

    store = run_command("export", _run)
    text = json.dumps(store.to_dict(), indent=2)
    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Exported[/green] {len(store.topics)} topics to {output}")

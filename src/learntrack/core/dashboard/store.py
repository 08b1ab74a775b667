"""
Dashboard store.

Keeps the in-memory tree of topics, projects and notes and mirrors every
mutation to an optional remote document store. The remote handle is
injected; when it is absent the store works on local state only.

Every mutating action follows the same sequence:
    1. validate against local state (not-found / duplicate errors raise here)
    2. perform the remote write, if a remote is attached
    3. apply the local mutation
    4. rebuild the project index

Actions touching several documents (add_project, remove_project,
delete_topic) send them as one atomic batch commit. A remote failure
raises RemoteSyncError from step 2 and leaves both local state and the
remote untouched. Loading is the exception: a failed load is logged and falls
back to an empty local tree.

Example:
    >>> store = DashboardStore(remote=MemoryDocumentStore())
    >>> await store.load_initial_data()
    >>> topic = await store.create_topic("Data Structures")
    >>> await store.add_project(topic.id, Project(id="p1", title="Heaps"))
    >>> store.get_topic_progress(topic.id)
    (0, 1)
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

from pydantic import BaseModel

from learntrack.core.remote.backend import (
    DocumentStore,
    DocumentWrite,
    note_path,
    notes_collection,
    project_path,
    projects_collection,
    topic_path,
    topics_collection,
)

from .exceptions import (
    DuplicateProjectError,
    DuplicateTopicError,
    NoteNotFoundError,
    ProjectNotFoundError,
    RemoteSyncError,
    TopicNotFoundError,
)
from .models import (
    Note,
    Project,
    ProjectPatch,
    ProjectRef,
    ProjectStatus,
    Topic,
    TopicPatch,
    note_from_document,
    project_from_document,
    topic_from_document,
    topic_id_from_name,
)

logger = logging.getLogger(__name__)

PatchT = TypeVar("PatchT", bound=BaseModel)


def _as_patch(model: type[PatchT], fields: PatchT | Mapping[str, Any]) -> PatchT:
    if isinstance(fields, model):
        return fields
    return model.model_validate(dict(fields))


@contextmanager
def _remote_errors(action: str) -> Iterator[None]:
    """Log a remote failure and re-raise it as RemoteSyncError."""
    try:
        yield
    except Exception as e:
        logger.exception("%s error", action)
        raise RemoteSyncError(action, f"Remote store operation failed: {e}") from e


class DashboardStore:
    """
    Client-side state store for the learning dashboard.

    Attributes:
        remote: Injected remote document store, or None for local-only use
        topics: Ordered topics, each owning its projects
        project_index: Project ID -> ProjectRef; the referenced project is
            the same object held in the topic tree
        using_remote: True once data was loaded from the remote
    """

    def __init__(self, remote: DocumentStore | None = None) -> None:
        self.remote = remote
        self.topics: list[Topic] = []
        self.project_index: dict[str, ProjectRef] = {}
        self.using_remote = False

    @classmethod
    def from_topics(
        cls, topics: list[Topic], remote: DocumentStore | None = None
    ) -> "DashboardStore":
        """Create a store whose local tree is a copy of the given topics."""
        store = cls(remote=remote)
        store.topics = [t.model_copy(deep=True) for t in topics]
        store.reindex_projects()
        return store

    # ==========================================================================
    # Loading and indexing
    # ==========================================================================

    async def load_initial_data(self) -> None:
        """
        Load the topic tree from the remote store.

        Does nothing if topics are already loaded. Without a remote, starts
        from an empty tree. Projects are read ordered by start date and
        notes by date, both newest first. Any read failure is logged and
        leaves an empty tree with ``using_remote`` False.
        """
        if self.topics:
            return

        if self.remote is None:
            self._reset(using_remote=False)
            return

        try:
            topics = await self._read_tree(self.remote)
        except Exception:
            logger.exception("Remote load failed, falling back to empty topics list")
            self._reset(using_remote=False)
            return

        self.topics = topics
        self.reindex_projects()
        self.using_remote = True
        logger.info(
            "Loaded %d topics and %d projects from %s",
            len(topics),
            len(self.project_index),
            self.remote.backend_name,
        )

    async def _read_tree(self, remote: DocumentStore) -> list[Topic]:
        topics: list[Topic] = []
        for topic_doc in await remote.list_documents(topics_collection()):
            projects: list[Project] = []
            project_docs = await remote.list_documents(
                projects_collection(topic_doc.id), order_by="startDate", descending=True
            )
            for project_doc in project_docs:
                note_docs = await remote.list_documents(
                    notes_collection(topic_doc.id, project_doc.id),
                    order_by="date",
                    descending=True,
                )
                notes = [note_from_document(n.id, n.data) for n in note_docs]
                projects.append(project_from_document(project_doc.id, project_doc.data, notes))
            topics.append(topic_from_document(topic_doc.id, topic_doc.data, projects))
        return topics

    def _reset(self, using_remote: bool) -> None:
        self.topics = []
        self.reindex_projects()
        self.using_remote = using_remote

    def reindex_projects(self) -> None:
        """Rebuild the project index from the topic tree."""
        index: dict[str, ProjectRef] = {}
        for topic in self.topics:
            for project in topic.projects:
                if project.id in index:
                    logger.warning(
                        "Project %s appears in topics %s and %s; indexing the latter",
                        project.id,
                        index[project.id].topic_id,
                        topic.id,
                    )
                index[project.id] = ProjectRef(topic_id=topic.id, project=project)
        self.project_index = index

    def check_index(self) -> list[str]:
        """
        Verify that the project index matches the topic tree.

        Returns:
            Human-readable problems; empty when the index is consistent
        """
        problems: list[str] = []
        seen: dict[str, str] = {}
        for topic in self.topics:
            for project in topic.projects:
                if project.id in seen:
                    problems.append(
                        f"project {project.id} is in topics {seen[project.id]} and {topic.id}"
                    )
                    continue
                seen[project.id] = topic.id
                ref = self.project_index.get(project.id)
                if ref is None:
                    problems.append(f"project {project.id} is missing from the index")
                elif ref.topic_id != topic.id:
                    problems.append(
                        f"project {project.id} indexed under {ref.topic_id}, found in {topic.id}"
                    )
                elif ref.project is not project:
                    problems.append(f"project {project.id} index entry is a stale copy")
        for project_id in self.project_index.keys() - seen.keys():
            problems.append(f"index entry {project_id} has no project in the tree")
        return problems

    # ==========================================================================
    # Seeding
    # ==========================================================================

    async def seed_remote(self, remote: DocumentStore, topics: list[Topic]) -> int:
        """
        Write a whole topic tree to a remote store.

        Writes sequentially: each topic, its projects, then each project's
        notes (with store-generated IDs). Local state is not touched.

        Args:
            remote: Store to populate
            topics: Tree to write

        Returns:
            Number of documents written
        """
        written = 0
        for topic in topics:
            await remote.set_document(topic_path(topic.id), topic.to_document())
            written += 1
            for project in topic.projects:
                await remote.set_document(
                    project_path(topic.id, project.id), project.to_document()
                )
                written += 1
                for note in project.notes:
                    await remote.add_document(
                        notes_collection(topic.id, project.id), note.to_document()
                    )
                    written += 1
        logger.info("Seeded %d documents into %s", written, remote.backend_name)
        return written

    seed_firestore = seed_remote

    # ==========================================================================
    # Topics
    # ==========================================================================

    async def create_topic(self, name: str) -> Topic:
        """
        Create a topic whose ID is derived from its name.

        Raises:
            ValueError: If the name is blank
            DuplicateTopicError: If a topic with the derived ID exists
            RemoteSyncError: If the remote write fails
        """
        if not name.strip():
            raise ValueError("Topic name cannot be empty")
        topic_id = topic_id_from_name(name)
        if self.get_topic_by_id(topic_id) is not None:
            raise DuplicateTopicError(name, topic_id)

        topic = Topic(id=topic_id, name=name, projects=[])
        if self.remote is not None:
            with _remote_errors("create_topic"):
                await self.remote.set_document(topic_path(topic_id), topic.to_document())

        self.topics.append(topic)
        self.reindex_projects()
        return topic

    async def update_topic(self, topic_id: str, fields: TopicPatch | Mapping[str, Any]) -> Topic:
        """
        Merge partial fields into a topic.

        Raises:
            TopicNotFoundError: If the topic does not exist
            ValidationError: If fields contain unknown keys or bad values
            RemoteSyncError: If the remote update fails
        """
        topic = self.get_topic_by_id(topic_id)
        if topic is None:
            raise TopicNotFoundError(topic_id)
        patch = _as_patch(TopicPatch, fields)

        document = patch.to_document()
        if self.remote is not None and document:
            with _remote_errors("update_topic"):
                await self.remote.update_document(topic_path(topic_id), document)

        for name in patch.model_fields_set:
            setattr(topic, name, getattr(patch, name))
        self.reindex_projects()
        return topic

    async def delete_topic(self, topic_id: str) -> None:
        """
        Delete a topic and everything below it.

        The remote does not cascade, so the topic's projects and notes are
        listed first and every document is deleted in a single batch.
        Deleting an unknown topic is not an error.
        """
        if self.remote is not None:
            with _remote_errors("delete_topic"):
                writes = await self._topic_deletes(self.remote, topic_id)
                await self.remote.commit(writes)

        self.topics = [t for t in self.topics if t.id != topic_id]
        self.reindex_projects()

    async def _topic_deletes(self, remote: DocumentStore, topic_id: str) -> list[DocumentWrite]:
        writes: list[DocumentWrite] = []
        for project_doc in await remote.list_documents(projects_collection(topic_id)):
            writes += await self._project_deletes(remote, topic_id, project_doc.id)
        writes.append(DocumentWrite.delete(topic_path(topic_id)))
        return writes

    async def _project_deletes(
        self, remote: DocumentStore, topic_id: str, project_id: str
    ) -> list[DocumentWrite]:
        writes = [
            DocumentWrite.delete(note_path(topic_id, project_id, note_doc.id))
            for note_doc in await remote.list_documents(notes_collection(topic_id, project_id))
        ]
        writes.append(DocumentWrite.delete(project_path(topic_id, project_id)))
        return writes

    # ==========================================================================
    # Projects
    # ==========================================================================

    async def add_project(self, topic_id: str, project: Project) -> Project:
        """
        Add a project to a topic.

        If the topic does not exist it is created with the ID as its name.
        The project object itself becomes part of the tree. Notes already
        on the project are written too and take the remote's IDs. The
        topic, project and note documents are committed as one batch.

        Raises:
            DuplicateProjectError: If the project ID is used anywhere in the tree
            RemoteSyncError: If the remote commit fails
        """
        existing = self.project_index.get(project.id)
        if existing is not None:
            raise DuplicateProjectError(project.id, existing.topic_id)
        topic = self.get_topic_by_id(topic_id)

        if self.remote is not None:
            with _remote_errors("add_project"):
                writes: list[DocumentWrite] = []
                if topic is None:
                    writes.append(DocumentWrite.set(topic_path(topic_id), {"name": topic_id}))
                writes.append(
                    DocumentWrite.set(project_path(topic_id, project.id), project.to_document())
                )
                collection = notes_collection(topic_id, project.id)
                note_ids = [self.remote.new_document_id(collection) for _ in project.notes]
                writes += [
                    DocumentWrite.set(collection + (note_id,), note.to_document())
                    for note, note_id in zip(project.notes, note_ids)
                ]
                await self.remote.commit(writes)
            for note, note_id in zip(project.notes, note_ids):
                note.id = note_id

        if topic is not None:
            topic.projects.append(project)
        else:
            self.topics.append(Topic(id=topic_id, name=topic_id, projects=[project]))
        self.reindex_projects()
        return project

    async def update_project(
        self, project_id: str, fields: ProjectPatch | Mapping[str, Any]
    ) -> Project:
        """
        Merge partial fields (title, description, status, dates) into a project.

        Raises:
            ProjectNotFoundError: If the project is not indexed
            ValidationError: If fields contain unknown keys or bad values
            RemoteSyncError: If the remote update fails
        """
        ref = self._lookup(project_id)
        patch = _as_patch(ProjectPatch, fields)

        document = patch.to_document()
        if self.remote is not None and document:
            with _remote_errors("update_project"):
                await self.remote.update_document(
                    project_path(ref.topic_id, project_id), document
                )

        for name, value in patch.local_fields().items():
            setattr(ref.project, name, value)
        self.reindex_projects()
        return ref.project

    async def remove_project(self, topic_id: str, project_id: str) -> None:
        """
        Remove a project (and its notes) from a topic.

        Ownership is checked through the project index: the project must be
        indexed under ``topic_id``.

        Raises:
            ProjectNotFoundError: If the project is not in that topic
            RemoteSyncError: If a remote read or the batch delete fails
        """
        ref = self.project_index.get(project_id)
        if ref is None or ref.topic_id != topic_id:
            raise ProjectNotFoundError(project_id, topic_id)

        if self.remote is not None:
            with _remote_errors("remove_project"):
                writes = await self._project_deletes(self.remote, topic_id, project_id)
                await self.remote.commit(writes)

        topic = self.get_topic_by_id(topic_id)
        if topic is not None:
            topic.projects = [p for p in topic.projects if p.id != project_id]
        self.reindex_projects()

    async def update_project_status(
        self, project_id: str, status: ProjectStatus | str
    ) -> Project:
        """
        Set a project's status.

        Raises:
            ProjectNotFoundError: If the project is not indexed
            ValueError: If status is not a recognised value
            RemoteSyncError: If the remote update fails
        """
        ref = self._lookup(project_id)
        new_status = ProjectStatus(status)

        if self.remote is not None:
            with _remote_errors("update_project_status"):
                await self.remote.update_document(
                    project_path(ref.topic_id, project_id), {"status": new_status.value}
                )

        ref.project.status = new_status
        self.reindex_projects()
        return ref.project

    # ==========================================================================
    # Notes
    # ==========================================================================

    async def add_note(self, project_id: str, note: Note) -> Note:
        """
        Append a note to a project.

        With a remote attached, the stored note takes the remote document ID.

        Returns:
            The note as stored in the project

        Raises:
            ProjectNotFoundError: If the project is not indexed
            RemoteSyncError: If the remote write fails
        """
        ref = self._lookup(project_id)

        stored = note.model_copy()
        if self.remote is not None:
            with _remote_errors("add_note"):
                note_id = await self.remote.add_document(
                    notes_collection(ref.topic_id, project_id), note.to_document()
                )
            stored = note.model_copy(update={"id": note_id})

        ref.project.notes.append(stored)
        self.reindex_projects()
        return stored

    async def update_note(self, project_id: str, note_index: int, note: Note) -> Note:
        """
        Replace the note at ``note_index``.

        The remote document is located by the existing note's ID. If it is
        missing remotely, a warning is logged and only local state changes.

        Returns:
            The note as stored in the project (keeps the existing ID)

        Raises:
            ProjectNotFoundError: If the project is not indexed
            NoteNotFoundError: If note_index is out of range
            RemoteSyncError: If a remote read or write fails
        """
        ref, existing = self._lookup_note(project_id, note_index)

        if self.remote is not None:
            path = note_path(ref.topic_id, project_id, existing.id)
            with _remote_errors("update_note"):
                if await self.remote.get_document(path) is not None:
                    await self.remote.update_document(path, note.to_document())
                else:
                    logger.warning(
                        "Note %s not found in remote store, updating local state only",
                        existing.id,
                    )

        stored = note.model_copy(update={"id": existing.id})
        ref.project.notes[note_index] = stored
        self.reindex_projects()
        return stored

    async def delete_note(self, project_id: str, note_index: int) -> Note:
        """
        Delete the note at ``note_index``.

        If the note's remote document is missing, a warning is logged and
        only local state changes.

        Returns:
            The removed note

        Raises:
            ProjectNotFoundError: If the project is not indexed
            NoteNotFoundError: If note_index is out of range
            RemoteSyncError: If a remote read or delete fails
        """
        ref, existing = self._lookup_note(project_id, note_index)

        if self.remote is not None:
            path = note_path(ref.topic_id, project_id, existing.id)
            with _remote_errors("delete_note"):
                if await self.remote.get_document(path) is not None:
                    await self.remote.delete_document(path)
                else:
                    logger.warning(
                        "Note %s not found in remote store, deleting from local state only",
                        existing.id,
                    )

        del ref.project.notes[note_index]
        self.reindex_projects()
        return existing

    def _lookup(self, project_id: str) -> ProjectRef:
        ref = self.project_index.get(project_id)
        if ref is None:
            raise ProjectNotFoundError(project_id)
        return ref

    def _lookup_note(self, project_id: str, note_index: int) -> tuple[ProjectRef, Note]:
        ref = self._lookup(project_id)
        if not 0 <= note_index < len(ref.project.notes):
            raise NoteNotFoundError(project_id, note_index)
        return ref, ref.project.notes[note_index]

    # ==========================================================================
    # Getters
    # ==========================================================================

    def get_topic_by_id(self, topic_id: str) -> Topic | None:
        return next((t for t in self.topics if t.id == topic_id), None)

    def get_project_by_id(self, project_id: str) -> Project | None:
        ref = self.project_index.get(project_id)
        return ref.project if ref is not None else None

    def get_project_topic_id(self, project_id: str) -> str | None:
        ref = self.project_index.get(project_id)
        return ref.topic_id if ref is not None else None

    def get_topic_projects(self, topic_id: str) -> list[Project]:
        topic = self.get_topic_by_id(topic_id)
        return topic.projects if topic is not None else []

    def get_project_notes(self, project_id: str) -> list[Note]:
        project = self.get_project_by_id(project_id)
        return project.notes if project is not None else []

    def get_topic_progress(self, topic_id: str) -> tuple[int, int]:
        """
        Return (completed, total) project counts for a topic.

        (0, 0) when the topic does not exist or has no projects.
        """
        topic = self.get_topic_by_id(topic_id)
        if topic is None:
            return 0, 0
        return topic.progress()

    def get_overall_progress(self) -> tuple[int, int]:
        """Return (completed, total) project counts across all topics."""
        completed = total = 0
        for topic in self.topics:
            done, count = topic.progress()
            completed += done
            total += count
        return completed, total

    def to_dict(self) -> dict[str, Any]:
        """Serialise the tree (camelCase keys), suitable for seeding."""
        return {"topics": [t.model_dump(by_alias=True, mode="json") for t in self.topics]}

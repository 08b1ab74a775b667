"""
Remote document store protocol and registry.

This module defines the DocumentStore protocol that the dashboard store
talks to, enabling pluggable persistence (Firestore, in-memory, etc.).

The store is hierarchical: collections hold documents, documents may own
subcollections. Paths are tuples of segments alternating collection and
document names:

    ("topics", "math")                                  topic document
    ("topics", "math", "projects", "p1")                project document
    ("topics", "math", "projects", "p1", "notes")       notes collection
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

DocumentPath = tuple[str, ...]

TOPICS = "topics"
PROJECTS = "projects"
NOTES = "notes"


class DocumentNotFoundError(Exception):
    """Raised when a partial update targets a document that does not exist."""

    def __init__(self, path: DocumentPath) -> None:
        self.path = path
        super().__init__(f"No document at '{'/'.join(path)}'")


@dataclass
class DocumentSnapshot:
    """
    A document read from the remote store.

    Attributes:
        id: Document ID (last path segment)
        data: Document fields
    """

    id: str
    data: dict[str, Any] = field(default_factory=dict)


class WriteOp(str, Enum):
    """Kind of write in a batch commit."""

    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class DocumentWrite:
    """
    One write of a batch passed to DocumentStore.commit().

    Attributes:
        op: Write kind
        path: Document path
        data: Fields to set or update (unused for deletes)
    """

    op: WriteOp
    path: DocumentPath
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def set(cls, path: DocumentPath, data: dict[str, Any]) -> "DocumentWrite":
        return cls(WriteOp.SET, path, data)

    @classmethod
    def update(cls, path: DocumentPath, fields: dict[str, Any]) -> "DocumentWrite":
        return cls(WriteOp.UPDATE, path, fields)

    @classmethod
    def delete(cls, path: DocumentPath) -> "DocumentWrite":
        return cls(WriteOp.DELETE, path)


@runtime_checkable
class DocumentStore(Protocol):
    """
    Protocol for remote document store implementations.

    All methods are coroutines; implementations perform network I/O (or
    simulate it). Any exception raised is treated by the dashboard store
    as a remote failure.
    """

    @property
    def backend_name(self) -> str:
        """
        Get the name of this backend.

        Returns:
            Backend name (e.g., 'firestore', 'memory')
        """
        ...

    async def list_documents(
        self,
        collection: DocumentPath,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[DocumentSnapshot]:
        """
        List all documents in a collection.

        Args:
            collection: Collection path (odd number of segments)
            order_by: Field to order by. Documents lacking the field are
                excluded from ordered results.
            descending: Order direction when order_by is given

        Returns:
            Document snapshots (empty list for a missing collection)
        """
        ...

    async def get_document(self, path: DocumentPath) -> DocumentSnapshot | None:
        """
        Read a single document.

        Returns:
            Snapshot, or None if the document does not exist
        """
        ...

    async def set_document(self, path: DocumentPath, data: dict[str, Any]) -> None:
        """Create or overwrite the document at path."""
        ...

    async def add_document(self, collection: DocumentPath, data: dict[str, Any]) -> str:
        """
        Create a document with a store-generated ID.

        Returns:
            The generated document ID
        """
        ...

    async def update_document(self, path: DocumentPath, fields: dict[str, Any]) -> None:
        """
        Apply a partial update to an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """
        ...

    async def delete_document(self, path: DocumentPath) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...

    def new_document_id(self, collection: DocumentPath) -> str:
        """
        Allocate a store-style ID for a document not yet written.

        Used to build batches that create documents with generated IDs.
        Nothing is written.
        """
        ...

    async def commit(self, writes: list[DocumentWrite]) -> None:
        """
        Apply a batch of writes atomically.

        Either every write is applied or none is. Writes are applied in
        order, so a later write to the same path sees the earlier one.

        Raises:
            DocumentNotFoundError: If an UPDATE targets a missing document
                (memory backend; Firestore raises its own NotFound)
        """
        ...


# ==============================================================================
# Paths
# ==============================================================================


def topics_collection() -> DocumentPath:
    return (TOPICS,)


def topic_path(topic_id: str) -> DocumentPath:
    return (TOPICS, topic_id)


def projects_collection(topic_id: str) -> DocumentPath:
    return (TOPICS, topic_id, PROJECTS)


def project_path(topic_id: str, project_id: str) -> DocumentPath:
    return (TOPICS, topic_id, PROJECTS, project_id)


def notes_collection(topic_id: str, project_id: str) -> DocumentPath:
    return (TOPICS, topic_id, PROJECTS, project_id, NOTES)


def note_path(topic_id: str, project_id: str, note_id: str) -> DocumentPath:
    return (TOPICS, topic_id, PROJECTS, project_id, NOTES, note_id)


# ==============================================================================
# Backend registry
# ==============================================================================

_backends: dict[str, type[DocumentStore]] = {}


def register_backend(name: str) -> Callable[[type[DocumentStore]], type[DocumentStore]]:
    """
    Decorator to register a document store implementation.

    Usage:
        @register_backend('memory')
        class MemoryDocumentStore:
            async def list_documents(self, ...):
                ...

    Args:
        name: Backend name (e.g., 'firestore', 'memory')

    Returns:
        Decorator function
    """

    def decorator(backend_class: type[DocumentStore]) -> type[DocumentStore]:
        _backends[name] = backend_class
        return backend_class

    return decorator


def get_backend_class(name: str) -> type[DocumentStore]:
    """
    Look up a registered backend class by name.

    Raises:
        ValueError: If no backend is registered under that name
    """
    backend_class = _backends.get(name)
    if backend_class is None:
        raise ValueError(
            f"Backend '{name}' not registered. Available backends: {', '.join(_backends.keys())}"
        )
    return backend_class


def list_backends() -> list[str]:
    """
    List all registered backend names.

    Returns:
        List of backend names
    """
    return list(_backends.keys())

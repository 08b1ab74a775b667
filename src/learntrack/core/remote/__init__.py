"""
Remote document stores.

Importing this package registers the built-in backends ('memory',
'firestore') with the backend registry.
"""

from .backend import (
    DocumentNotFoundError,
    DocumentPath,
    DocumentSnapshot,
    DocumentStore,
    DocumentWrite,
    WriteOp,
    get_backend_class,
    list_backends,
    note_path,
    notes_collection,
    project_path,
    projects_collection,
    register_backend,
    topic_path,
    topics_collection,
)
from .firestore import FirestoreDocumentStore
from .memory import MemoryDocumentStore

__all__ = [
    "DocumentNotFoundError",
    "DocumentPath",
    "DocumentSnapshot",
    "DocumentStore",
    "DocumentWrite",
    "FirestoreDocumentStore",
    "MemoryDocumentStore",
    "get_backend_class",
    "list_backends",
    "note_path",
    "notes_collection",
    "project_path",
    "projects_collection",
    "register_backend",
    "topic_path",
    "topics_collection",
    "WriteOp",
]

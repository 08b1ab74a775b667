"""
In-memory document store.

Implements the DocumentStore protocol in process memory with the same
observable semantics as Firestore: generated 20-character IDs, ordered
queries that skip documents lacking the order field and compare values
by type before value, NotFound on partial updates of missing documents,
atomic batch commits, and no cascading deletes.

Used as the fake remote in tests and for offline experiments.

Example:
    >>> store = MemoryDocumentStore()
    >>> await store.set_document(("topics", "math"), {"name": "Math"})
    >>> [s.id for s in await store.list_documents(("topics",))]
    ['math']
"""

import copy
import secrets
import string
from datetime import datetime
from typing import Any

from .backend import (
    DocumentNotFoundError,
    DocumentPath,
    DocumentSnapshot,
    DocumentWrite,
    WriteOp,
    register_backend,
)

Collections = dict[DocumentPath, dict[str, dict[str, Any]]]

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20


def _generate_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def _split(path: DocumentPath) -> tuple[DocumentPath, str]:
    if len(path) < 2 or len(path) % 2:
        raise ValueError(f"Invalid document path: {'/'.join(path)}")
    return path[:-1], path[-1]


def _check_collection(collection: DocumentPath) -> None:
    if len(collection) % 2 == 0:
        raise ValueError(f"Invalid collection path: {'/'.join(collection)}")


def order_key(value: Any) -> tuple[int, Any]:
    """
    Sort key following Firestore's cross-type ordering.

    Values compare by type first (null < boolean < number < timestamp <
    string < bytes < array < map), then by value within a type. Integers
    and floats share the number rank.
    """
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, (int, float)):
        return (2, value)
    if isinstance(value, datetime):
        return (3, value.timestamp())
    if isinstance(value, str):
        return (4, value)
    if isinstance(value, bytes):
        return (5, value)
    if isinstance(value, (list, tuple)):
        return (7, [order_key(v) for v in value])
    if isinstance(value, dict):
        return (8, sorted((k, order_key(v)) for k, v in value.items()))
    return (6, str(value))


@register_backend("memory")
class MemoryDocumentStore:
    """
    Document store held in a dictionary.

    Collections are keyed by their full path; each maps document IDs to
    field dictionaries. Data is deep-copied on every read and write so
    callers never share mutable state with the store.
    """

    def __init__(self) -> None:
        self._collections: Collections = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def list_documents(
        self,
        collection: DocumentPath,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[DocumentSnapshot]:
        _check_collection(collection)
        docs = self._collections.get(collection, {})
        items = list(docs.items())
        if order_by is not None:
            items = [(doc_id, data) for doc_id, data in items if order_by in data]
            # Ties are broken by document ID in the same direction
            items.sort(
                key=lambda item: (order_key(item[1][order_by]), item[0]),
                reverse=descending,
            )
        return [DocumentSnapshot(id=doc_id, data=copy.deepcopy(data)) for doc_id, data in items]

    async def get_document(self, path: DocumentPath) -> DocumentSnapshot | None:
        collection, doc_id = _split(path)
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return DocumentSnapshot(id=doc_id, data=copy.deepcopy(data))

    async def set_document(self, path: DocumentPath, data: dict[str, Any]) -> None:
        self._apply(self._collections, DocumentWrite.set(path, data))

    async def add_document(self, collection: DocumentPath, data: dict[str, Any]) -> str:
        doc_id = self.new_document_id(collection)
        self._apply(self._collections, DocumentWrite.set(collection + (doc_id,), data))
        return doc_id

    async def update_document(self, path: DocumentPath, fields: dict[str, Any]) -> None:
        self._apply(self._collections, DocumentWrite.update(path, fields))

    async def delete_document(self, path: DocumentPath) -> None:
        self._apply(self._collections, DocumentWrite.delete(path))

    def new_document_id(self, collection: DocumentPath) -> str:
        _check_collection(collection)
        docs = self._collections.get(collection, {})
        doc_id = _generate_id()
        while doc_id in docs:
            doc_id = _generate_id()
        return doc_id

    async def commit(self, writes: list[DocumentWrite]) -> None:
        # Writes go to a copy that replaces the live state only if all succeed
        staged = copy.deepcopy(self._collections)
        for write in writes:
            self._apply(staged, write)
        self._collections = staged

    def _apply(self, collections: Collections, write: DocumentWrite) -> None:
        collection, doc_id = _split(write.path)
        if write.op == WriteOp.SET:
            collections.setdefault(collection, {})[doc_id] = copy.deepcopy(write.data)
        elif write.op == WriteOp.UPDATE:
            data = collections.get(collection, {}).get(doc_id)
            if data is None:
                raise DocumentNotFoundError(write.path)
            data.update(copy.deepcopy(write.data))
        else:
            docs = collections.get(collection)
            if docs is not None:
                docs.pop(doc_id, None)
                if not docs:
                    del collections[collection]

    def document_paths(self) -> list[DocumentPath]:
        """Return the paths of every stored document, sorted."""
        return sorted(
            collection + (doc_id,)
            for collection, docs in self._collections.items()
            for doc_id in docs
        )

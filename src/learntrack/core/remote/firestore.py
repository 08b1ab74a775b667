"""
Firestore document store.

Adapts google-cloud-firestore's AsyncClient to the DocumentStore
protocol. Connection settings (project, database, credentials, emulator)
are resolved by the provisioning layer; this module only translates
calls.
"""

import logging
from typing import Any

from google.api_core.exceptions import NotFound
from google.cloud.firestore import AsyncClient

from .backend import (
    DocumentNotFoundError,
    DocumentPath,
    DocumentSnapshot,
    DocumentWrite,
    WriteOp,
    register_backend,
)

logger = logging.getLogger(__name__)


@register_backend("firestore")
class FirestoreDocumentStore:
    """
    Document store backed by Cloud Firestore.

    Example:
        >>> client = AsyncClient(project="my-project")
        >>> remote = FirestoreDocumentStore(client)
        >>> await remote.set_document(("topics", "math"), {"name": "Math"})
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    @property
    def backend_name(self) -> str:
        return "firestore"

    async def list_documents(
        self,
        collection: DocumentPath,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[DocumentSnapshot]:
        query: Any = self.client.collection(*collection)
        if order_by is not None:
            direction = "DESCENDING" if descending else "ASCENDING"
            query = query.order_by(order_by, direction=direction)
        snapshots: list[DocumentSnapshot] = []
        async for snap in query.stream():
            snapshots.append(DocumentSnapshot(id=snap.id, data=snap.to_dict() or {}))
        logger.debug("Listed %d documents in %s", len(snapshots), "/".join(collection))
        return snapshots

    async def get_document(self, path: DocumentPath) -> DocumentSnapshot | None:
        snap = await self.client.document(*path).get()
        if not snap.exists:
            return None
        return DocumentSnapshot(id=snap.id, data=snap.to_dict() or {})

    async def set_document(self, path: DocumentPath, data: dict[str, Any]) -> None:
        await self.client.document(*path).set(data)

    async def add_document(self, collection: DocumentPath, data: dict[str, Any]) -> str:
        _, ref = await self.client.collection(*collection).add(data)
        return str(ref.id)

    async def update_document(self, path: DocumentPath, fields: dict[str, Any]) -> None:
        try:
            await self.client.document(*path).update(fields)
        except NotFound as e:
            raise DocumentNotFoundError(path) from e

    async def delete_document(self, path: DocumentPath) -> None:
        await self.client.document(*path).delete()

    def new_document_id(self, collection: DocumentPath) -> str:
        # An unnamed document reference carries a client-generated ID
        return str(self.client.collection(*collection).document().id)

    async def commit(self, writes: list[DocumentWrite]) -> None:
        """Send the writes as one AsyncWriteBatch; Firestore applies all or none."""
        batch = self.client.batch()
        for write in writes:
            ref = self.client.document(*write.path)
            if write.op == WriteOp.SET:
                batch.set(ref, write.data)
            elif write.op == WriteOp.UPDATE:
                batch.update(ref, write.data)
            else:
                batch.delete(ref)
        await batch.commit()
        logger.debug("Committed batch of %d writes", len(writes))

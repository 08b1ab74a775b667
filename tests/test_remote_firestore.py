"""
Tests for FirestoreDocumentStore.

The AsyncClient is replaced by mocks; tests check that protocol calls are
translated into the right Firestore client calls.
"""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from google.api_core.exceptions import NotFound

from learntrack.core.remote import (
    DocumentNotFoundError,
    DocumentStore,
    DocumentWrite,
    FirestoreDocumentStore,
)


def make_snapshot(doc_id: str, data: dict | None, exists: bool = True) -> Mock:
    snap = Mock()
    snap.id = doc_id
    snap.exists = exists
    snap.to_dict.return_value = data
    return snap


def make_stream(*snapshots: Mock):
    async def stream():
        for snap in snapshots:
            yield snap

    return stream


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def remote(client: MagicMock) -> FirestoreDocumentStore:
    return FirestoreDocumentStore(client)


class TestFirestoreDocumentStore:
    """Tests for call translation."""

    def test_satisfies_protocol(self, remote: FirestoreDocumentStore) -> None:
        assert isinstance(remote, DocumentStore)
        assert remote.backend_name == "firestore"

    @pytest.mark.asyncio
    async def test_list_unordered(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        collection = client.collection.return_value
        collection.stream = make_stream(make_snapshot("ml", {"name": "ML"}))

        docs = await remote.list_documents(("topics",))

        client.collection.assert_called_once_with("topics")
        collection.order_by.assert_not_called()
        assert [(d.id, d.data) for d in docs] == [("ml", {"name": "ML"})]

    @pytest.mark.asyncio
    async def test_list_ordered_descending(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        collection = client.collection.return_value
        query = collection.order_by.return_value
        query.stream = make_stream(
            make_snapshot("p2", {"startDate": "2024-02-01"}),
            make_snapshot("p1", None),
        )

        docs = await remote.list_documents(
            ("topics", "ml", "projects"), order_by="startDate", descending=True
        )

        client.collection.assert_called_once_with("topics", "ml", "projects")
        collection.order_by.assert_called_once_with("startDate", direction="DESCENDING")
        assert [d.id for d in docs] == ["p2", "p1"]
        assert docs[1].data == {}

    @pytest.mark.asyncio
    async def test_list_ordered_ascending(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        collection = client.collection.return_value
        collection.order_by.return_value.stream = make_stream()
        await remote.list_documents(("topics",), order_by="name")
        collection.order_by.assert_called_once_with("name", direction="ASCENDING")

    @pytest.mark.asyncio
    async def test_get_document(self, client: MagicMock, remote: FirestoreDocumentStore) -> None:
        document = client.document.return_value
        document.get = AsyncMock(return_value=make_snapshot("ml", {"name": "ML"}))

        snap = await remote.get_document(("topics", "ml"))

        client.document.assert_called_once_with("topics", "ml")
        assert snap.id == "ml"
        assert snap.data == {"name": "ML"}

    @pytest.mark.asyncio
    async def test_get_missing_document(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        client.document.return_value.get = AsyncMock(
            return_value=make_snapshot("ml", None, exists=False)
        )
        assert await remote.get_document(("topics", "ml")) is None

    @pytest.mark.asyncio
    async def test_set_document(self, client: MagicMock, remote: FirestoreDocumentStore) -> None:
        document = client.document.return_value
        document.set = AsyncMock()
        await remote.set_document(("topics", "ml"), {"name": "ML"})
        document.set.assert_awaited_once_with({"name": "ML"})

    @pytest.mark.asyncio
    async def test_add_document(self, client: MagicMock, remote: FirestoreDocumentStore) -> None:
        ref = Mock()
        ref.id = "generated"
        collection = client.collection.return_value
        collection.add = AsyncMock(return_value=(Mock(), ref))

        doc_id = await remote.add_document(("topics", "ml", "projects", "p1", "notes"), {"a": 1})

        client.collection.assert_called_once_with("topics", "ml", "projects", "p1", "notes")
        collection.add.assert_awaited_once_with({"a": 1})
        assert doc_id == "generated"

    @pytest.mark.asyncio
    async def test_update_document(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        document = client.document.return_value
        document.update = AsyncMock()
        await remote.update_document(("topics", "ml"), {"name": "ML"})
        document.update.assert_awaited_once_with({"name": "ML"})

    @pytest.mark.asyncio
    async def test_update_missing_document(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        client.document.return_value.update = AsyncMock(side_effect=NotFound("no document"))
        with pytest.raises(DocumentNotFoundError) as exc_info:
            await remote.update_document(("topics", "ml"), {"name": "ML"})
        assert isinstance(exc_info.value.__cause__, NotFound)

    @pytest.mark.asyncio
    async def test_delete_document(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        document = client.document.return_value
        document.delete = AsyncMock()
        await remote.delete_document(("topics", "ml"))
        client.document.assert_called_once_with("topics", "ml")
        document.delete.assert_awaited_once_with()

    def test_new_document_id(self, client: MagicMock, remote: FirestoreDocumentStore) -> None:
        client.collection.return_value.document.return_value.id = "auto123"
        assert remote.new_document_id(("topics", "ml", "projects", "p1", "notes")) == "auto123"
        client.collection.assert_called_once_with("topics", "ml", "projects", "p1", "notes")
        client.collection.return_value.document.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_commit_uses_one_batch(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        batch = client.batch.return_value
        batch.commit = AsyncMock()
        refs = {}

        def document(*path):
            return refs.setdefault(path, Mock(name="/".join(path)))

        client.document.side_effect = document

        await remote.commit(
            [
                DocumentWrite.set(("topics", "ml"), {"name": "ML"}),
                DocumentWrite.update(("topics", "ml", "projects", "p1"), {"status": "completed"}),
                DocumentWrite.delete(("topics", "old")),
            ]
        )

        client.batch.assert_called_once_with()
        batch.set.assert_called_once_with(refs[("topics", "ml")], {"name": "ML"})
        batch.update.assert_called_once_with(
            refs[("topics", "ml", "projects", "p1")], {"status": "completed"}
        )
        batch.delete.assert_called_once_with(refs[("topics", "old")])
        batch.commit.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_commit_failure_propagates(
        self, client: MagicMock, remote: FirestoreDocumentStore
    ) -> None:
        client.batch.return_value.commit = AsyncMock(side_effect=NotFound("missing"))
        with pytest.raises(NotFound):
            await remote.commit([DocumentWrite.update(("topics", "ml"), {"name": "ML"})])

"""Google Cloud Firestore implementation of the DocumentStore protocol.

Wraps ``google.cloud.firestore.AsyncClient``. Credentials come from the
environment the way every Google Cloud client finds them
(GOOGLE_APPLICATION_CREDENTIALS, workload identity, or the emulator via
FIRESTORE_EMULATOR_HOST).
"""

import logging
from typing import Any

from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from src.ports.document_store import DocumentSnapshot, QueryOperator

logger = logging.getLogger(__name__)


class FirestoreDocumentStore:
    """Document store backed by Firestore.

    SDK exceptions (``google.api_core.exceptions.*``) propagate unchanged.

    Example:
        store = FirestoreDocumentStore(project="my-project")
        doc_id = await store.add("favorites", {"userId": "u1", "mediaId": 603})
    """

    def __init__(self, project: str | None = None, database: str | None = None) -> None:
        """Initialize the adapter.

        Args:
            project: Google Cloud project id. None lets the SDK infer it.
            database: Firestore database id. None uses "(default)".
        """
        self._project = project
        self._database = database
        self._client: firestore.AsyncClient | None = None

    def _get_client(self) -> firestore.AsyncClient:
        """Get or create the Firestore client on first use."""
        if self._client is None:
            kwargs: dict[str, Any] = {}
            if self._project:
                kwargs["project"] = self._project
            if self._database:
                kwargs["database"] = self._database
            self._client = firestore.AsyncClient(**kwargs)
            logger.debug(
                "Created Firestore client",
                extra={"project": self._project, "database": self._database},
            )
        return self._client

    async def connect(self) -> None:
        self._get_client()

    async def close(self) -> None:
        # The client's gRPC channel is released when it is garbage collected.
        self._client = None

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        _, doc_ref = await self._get_client().collection(collection).add(data)
        logger.debug(
            "Added Firestore document",
            extra={"collection": collection, "document_id": doc_ref.id},
        )
        return str(doc_ref.id)

    async def delete(self, collection: str, document_id: str) -> None:
        await self._get_client().collection(collection).document(document_id).delete()

    async def get_all(self, collection: str) -> list[DocumentSnapshot]:
        stream = self._get_client().collection(collection).stream()
        return [
            DocumentSnapshot(id=snapshot.id, fields=snapshot.to_dict() or {})
            async for snapshot in stream
        ]

    async def query(
        self,
        collection: str,
        field_path: str,
        operator: QueryOperator,
        value: Any,
    ) -> list[DocumentSnapshot]:
        query = self._get_client().collection(collection).where(
            filter=FieldFilter(field_path, operator.value, value)
        )
        return [
            DocumentSnapshot(id=snapshot.id, fields=snapshot.to_dict() or {})
            async for snapshot in query.stream()
        ]

    async def set_merge(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        doc_ref = self._get_client().collection(collection).document(document_id)
        await doc_ref.set(data, merge=True)

"""Document store gateway.

Five named operations over a document collection. No operation raises: a
failed store call is classified, logged, and handed back as a StoreResult
carrying a StoreError, so the caller decides whether to retry, report, or
ignore it.

Example:
    gateway = DocumentStoreGateway(store)

    result = await gateway.list_by_query("favorites", "userId", "==", "u1")
    if result.ok:
        for record in result.value:
            print(record["id"], record["title"])
    else:
        logger.warning("favorites_unavailable", kind=result.error.kind.name)
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from src.core.errors import ErrorCategory, StoreError
from src.core.logging import get_logger
from src.ports.document_store import DocumentStore, QueryOperator

logger = get_logger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class StoreResult(Generic[T]):
    """Outcome of a gateway operation.

    Attributes:
        value: The operation's result on success (None for writes).
        error: The failure, or None on success.
    """

    value: T | None = None
    error: StoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Return the value, raising the carried StoreError on failure."""
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T | None = None) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: StoreError) -> "StoreResult[T]":
        return cls(error=error)


class DocumentStoreGateway:
    """Create, delete, list, query and merge-update documents.

    Payloads pass through untouched; their shape is the caller's business.
    Concurrent calls are independent round-trips with no ordering between
    them; two updates to one document resolve last-write-wins in the store.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    @property
    def store(self) -> DocumentStore:
        return self._store

    async def _run(
        self,
        operation: str,
        collection: str,
        call: Awaitable[R],
        **context: Any,
    ) -> StoreResult[R]:
        try:
            value = await call
        except Exception as ex:
            error = StoreError.from_exception(ex, operation=operation, collection=collection)
            logger.error(
                "store_operation_failed",
                operation=operation,
                collection=collection,
                kind=error.kind.name,
                error=error.message,
                **context,
            )
            return StoreResult.failure(error)
        return StoreResult.success(value)

    async def create(self, data: dict[str, Any], collection: str) -> StoreResult[None]:
        """Add a document; the store assigns its id."""
        result = await self._run("create", collection, self._store.add(collection, data))
        if result.error is not None:
            return StoreResult.failure(result.error)
        logger.debug("document_created", collection=collection)
        return StoreResult.success(None)

    async def delete(self, document_id: str, collection: str) -> StoreResult[None]:
        """Remove a document by id."""
        return await self._run(
            "delete",
            collection,
            self._store.delete(collection, document_id),
            document_id=document_id,
        )

    async def list_all(self, collection: str) -> StoreResult[list[dict[str, Any]]]:
        """Every payload in a collection, without document ids."""
        result = await self._run("list_all", collection, self._store.get_all(collection))
        if result.error is not None:
            return StoreResult.failure(result.error)
        payloads = [snapshot.fields for snapshot in result.value or []]
        logger.debug("documents_listed", collection=collection, count=len(payloads))
        return StoreResult.success(payloads)

    async def list_by_query(
        self,
        collection: str,
        field: str,
        operator: QueryOperator | str,
        value: Any,
    ) -> StoreResult[list[dict[str, Any]]]:
        """Records matching ``field <operator> value``, each with its ``id``."""
        try:
            op = QueryOperator.parse(operator)
        except ValueError as ex:
            error = StoreError(
                message=str(ex),
                kind=ErrorCategory.INVALID_INPUT,
                operation="list_by_query",
                collection=collection,
                original_error=ex,
            )
            logger.warning(
                "store_query_rejected",
                collection=collection,
                field=field,
                operator=str(operator),
            )
            return StoreResult.failure(error)

        result = await self._run(
            "list_by_query",
            collection,
            self._store.query(collection, field, op, value),
            field=field,
            operator=op.value,
        )
        if result.error is not None:
            return StoreResult.failure(result.error)
        return StoreResult.success([snapshot.with_id() for snapshot in result.value or []])

    async def update(
        self,
        document_id: str,
        data: dict[str, Any],
        collection: str,
    ) -> StoreResult[None]:
        """Merge ``data`` into an existing document's fields."""
        return await self._run(
            "update",
            collection,
            self._store.set_merge(collection, document_id, data),
            document_id=document_id,
        )

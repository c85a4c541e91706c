"""In-memory implementation of the DocumentStore protocol.

Used by the test suite and for running the API without cloud credentials
(STORE_BACKEND=memory). Query and merge behavior follows Firestore closely
enough that code exercised here behaves the same against the real store:

- Document ids are 20-character alphanumeric strings.
- Reads return documents ordered by id.
- Documents missing the queried field never match, and comparisons between
  values of different types never match.
- Merge writes merge nested maps key by key.
"""

import copy
import secrets
import string
from datetime import datetime
from typing import Any

from src.ports.document_store import DocumentSnapshot, QueryOperator

AUTO_ID_ALPHABET = string.ascii_letters + string.digits
AUTO_ID_LENGTH = 20

_MISSING = object()


def _auto_id() -> str:
    return "".join(secrets.choice(AUTO_ID_ALPHABET) for _ in range(AUTO_ID_LENGTH))


def _lookup(fields: dict[str, Any], field_path: str) -> Any:
    """Resolve a dotted field path, returning _MISSING when absent."""
    value: Any = fields
    for part in field_path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _type_family(value: Any) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bytes):
        return "bytes"
    if isinstance(value, datetime):
        return "timestamp"
    return type(value).__name__


def _same(left: Any, right: Any) -> bool:
    """Equality that also requires matching types, so ``True`` never equals ``1``."""
    if _type_family(left) != _type_family(right):
        return False
    if isinstance(left, list):
        return len(left) == len(right) and all(_same(a, b) for a, b in zip(left, right))
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(_same(left[k], right[k]) for k in left)
    return bool(left == right)


def _compare(left: Any, right: Any, operator: QueryOperator) -> bool:
    if left is None or right is None:
        return False
    if _type_family(left) != _type_family(right):
        return False
    try:
        if operator is QueryOperator.LESS_THAN:
            return bool(left < right)
        if operator is QueryOperator.LESS_THAN_OR_EQUAL:
            return bool(left <= right)
        if operator is QueryOperator.GREATER_THAN:
            return bool(left > right)
        return bool(left >= right)
    except TypeError:
        return False


def matches(fields: dict[str, Any], field_path: str, operator: QueryOperator, value: Any) -> bool:
    """Evaluate a single-field filter against a document payload."""
    actual = _lookup(fields, field_path)
    if actual is _MISSING:
        return False

    if operator is QueryOperator.EQUAL:
        return _same(actual, value)
    if operator is QueryOperator.NOT_EQUAL:
        return actual is not None and not _same(actual, value)
    if operator is QueryOperator.IN:
        return any(_same(actual, candidate) for candidate in value)
    if operator is QueryOperator.NOT_IN:
        return actual is not None and not any(_same(actual, candidate) for candidate in value)
    if operator is QueryOperator.ARRAY_CONTAINS:
        return isinstance(actual, list) and any(_same(element, value) for element in actual)
    if operator is QueryOperator.ARRAY_CONTAINS_ANY:
        return isinstance(actual, list) and any(
            _same(element, candidate) for element in actual for candidate in value
        )
    return _compare(actual, value, operator)


def deep_merge(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    """Merge ``updates`` into ``target`` in place, recursing into nested maps."""
    for key, value in updates.items():
        existing = target.get(key)
        if isinstance(value, dict) and isinstance(existing, dict):
            deep_merge(existing, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


class MemoryDocumentStore:
    """Dict-backed document store.

    Example:
        async with MemoryDocumentStore() as store:
            doc_id = await store.add("favorites", {"mediaId": 603})
            docs = await store.get_all("favorites")
    """

    def __init__(self) -> None:
        self._connected: bool = False
        # collection -> document id -> payload
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def __aenter__(self) -> "MemoryDocumentStore":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.close()

    async def connect(self) -> None:
        self._connected = True

    async def close(self) -> None:
        self._connected = False

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise RuntimeError(
                "Document store not connected. Call connect() or use async context manager."
            )

    def _collection(self, name: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(name, {})

    def _snapshots(self, documents: dict[str, dict[str, Any]]) -> list[DocumentSnapshot]:
        return [
            DocumentSnapshot(id=doc_id, fields=copy.deepcopy(documents[doc_id]))
            for doc_id in sorted(documents)
        ]

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        self._ensure_connected()
        documents = self._collection(collection)
        doc_id = _auto_id()
        while doc_id in documents:
            doc_id = _auto_id()
        documents[doc_id] = copy.deepcopy(data)
        return doc_id

    async def delete(self, collection: str, document_id: str) -> None:
        self._ensure_connected()
        self._collection(collection).pop(document_id, None)

    async def get_all(self, collection: str) -> list[DocumentSnapshot]:
        self._ensure_connected()
        return self._snapshots(self._collection(collection))

    async def query(
        self,
        collection: str,
        field_path: str,
        operator: QueryOperator,
        value: Any,
    ) -> list[DocumentSnapshot]:
        self._ensure_connected()
        if operator.takes_list and not isinstance(value, (list, tuple)):
            raise ValueError(f"Operator {operator.value!r} requires a list value")
        documents = self._collection(collection)
        selected = {
            doc_id: fields
            for doc_id, fields in documents.items()
            if matches(fields, field_path, operator, value)
        }
        return self._snapshots(selected)

    async def set_merge(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        self._ensure_connected()
        documents = self._collection(collection)
        deep_merge(documents.setdefault(document_id, {}), data)

    def document_count(self, collection: str) -> int:
        """Number of documents in a collection (test helper)."""
        return len(self._collections.get(collection, {}))

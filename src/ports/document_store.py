"""Document store protocol.

Defines the boundary between the store gateway and a hosted document
database. Documents live in named collections, carry a store-assigned string
id and an arbitrary JSON-like payload that this layer never validates.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol


@dataclass
class DocumentSnapshot:
    """A document as read back from the store.

    Attributes:
        id: Store-assigned document id.
        fields: The document payload.
    """

    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def with_id(self) -> dict[str, Any]:
        """Payload with the document id under ``"id"``.

        A payload field named ``id`` wins over the document id.
        """
        return {"id": self.id, **self.fields}


class QueryOperator(Enum):
    """Comparison operators a single-field query may use."""

    EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    IN = "in"
    NOT_IN = "not-in"
    ARRAY_CONTAINS = "array-contains"
    ARRAY_CONTAINS_ANY = "array-contains-any"

    @classmethod
    def parse(cls, value: "QueryOperator | str") -> "QueryOperator":
        """Coerce a string such as ``"<="`` into an operator.

        Raises:
            ValueError: If the operator is not supported.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            supported = ", ".join(op.value for op in cls)
            raise ValueError(
                f"Unsupported query operator {value!r}. Supported: {supported}"
            ) from None

    @property
    def takes_list(self) -> bool:
        """Whether the comparison value must be a list."""
        return self in (
            QueryOperator.IN,
            QueryOperator.NOT_IN,
            QueryOperator.ARRAY_CONTAINS_ANY,
        )


class DocumentStore(Protocol):
    """Protocol for collection-scoped document persistence.

    Implementations raise their SDK's exceptions unchanged; classification
    and error reporting happen in the gateway.
    """

    async def connect(self) -> None:
        """Prepare the underlying client."""
        ...

    async def close(self) -> None:
        """Release the underlying client."""
        ...

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Create a document with a store-assigned id.

        Args:
            collection: Collection name.
            data: Document payload.

        Returns:
            The new document's id.
        """
        ...

    async def delete(self, collection: str, document_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...

    async def get_all(self, collection: str) -> list[DocumentSnapshot]:
        """Read every document in a collection, ordered by document id."""
        ...

    async def query(
        self,
        collection: str,
        field_path: str,
        operator: QueryOperator,
        value: Any,
    ) -> list[DocumentSnapshot]:
        """Read the documents whose ``field_path`` satisfies the filter.

        Documents that lack the field never match.
        """
        ...

    async def set_merge(
        self,
        collection: str,
        document_id: str,
        data: dict[str, Any],
    ) -> None:
        """Merge ``data`` into a document, creating it if missing.

        Nested maps are merged key by key; other values are replaced.
        """
        ...

"""Document store factory.

Supported backends:
- "firestore": Google Cloud Firestore (production)
- "memory": In-memory store for tests and local runs

Example:
    store = create_document_store("firestore", project="my-project")
    store = create_document_store("memory")
"""

from src.adapters.firestore_adapter import FirestoreDocumentStore
from src.adapters.memory_document_store import MemoryDocumentStore

DocumentStoreType = FirestoreDocumentStore | MemoryDocumentStore

SUPPORTED_BACKENDS = ("firestore", "memory")


def create_document_store(backend: str, **kwargs: str | None) -> DocumentStoreType:
    """Create a document store for the given backend.

    Args:
        backend: "firestore" or "memory" (case-insensitive).
        **kwargs: Backend-specific options. Firestore accepts ``project`` and
            ``database``; empty values fall back to the SDK defaults.

    Returns:
        An unconnected document store.

    Raises:
        ValueError: If the backend is not supported.
    """
    normalized = backend.strip().lower()

    if normalized == "firestore":
        return FirestoreDocumentStore(
            project=kwargs.get("project") or None,
            database=kwargs.get("database") or None,
        )

    if normalized == "memory":
        return MemoryDocumentStore()

    raise ValueError(
        f"Unsupported backend: {backend!r}. Supported backends: "
        + ", ".join(repr(name) for name in SUPPORTED_BACKENDS)
    )

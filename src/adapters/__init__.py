"""Adapters for external systems.

This module contains implementations of the DocumentStore protocol for
the supported storage backends.
"""

from src.adapters.factory import DocumentStoreType, create_document_store
from src.adapters.firestore_adapter import FirestoreDocumentStore
from src.adapters.memory_document_store import MemoryDocumentStore

__all__ = [
    "DocumentStoreType",
    "FirestoreDocumentStore",
    "MemoryDocumentStore",
    "create_document_store",
]

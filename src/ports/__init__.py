"""Ports (interfaces) for the application.

This module contains Protocol definitions that define the boundaries between
the application core and external systems.
"""

from src.ports.document_store import DocumentSnapshot, DocumentStore, QueryOperator

__all__ = [
    "DocumentSnapshot",
    "DocumentStore",
    "QueryOperator",
]

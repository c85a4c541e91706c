"""Tests for the document store port types and backend factory."""

import pytest

from src.adapters import FirestoreDocumentStore, MemoryDocumentStore, create_document_store
from src.ports.document_store import DocumentSnapshot, QueryOperator


class TestDocumentSnapshot:
    def test_with_id(self) -> None:
        snapshot = DocumentSnapshot(id="abc", fields={"title": "A"})
        assert snapshot.with_id() == {"id": "abc", "title": "A"}

    def test_payload_id_field_wins(self) -> None:
        snapshot = DocumentSnapshot(id="abc", fields={"id": 7})
        assert snapshot.with_id() == {"id": 7}


class TestQueryOperator:
    @pytest.mark.parametrize(
        "symbol",
        ["==", "!=", "<", "<=", ">", ">=", "in", "not-in", "array-contains", "array-contains-any"],
    )
    def test_parse_supported(self, symbol) -> None:
        assert QueryOperator.parse(symbol).value == symbol

    def test_parse_passes_operator_through(self) -> None:
        assert QueryOperator.parse(QueryOperator.IN) is QueryOperator.IN

    def test_parse_unsupported_lists_options(self) -> None:
        with pytest.raises(ValueError, match="Supported: ==, !="):
            QueryOperator.parse("LIKE")

    def test_takes_list(self) -> None:
        assert QueryOperator.IN.takes_list
        assert QueryOperator.ARRAY_CONTAINS_ANY.takes_list
        assert not QueryOperator.ARRAY_CONTAINS.takes_list
        assert not QueryOperator.EQUAL.takes_list


class TestCreateDocumentStore:
    def test_memory(self) -> None:
        assert isinstance(create_document_store("memory"), MemoryDocumentStore)

    def test_firestore_case_insensitive(self) -> None:
        store = create_document_store(" Firestore ", project="p", database="")
        assert isinstance(store, FirestoreDocumentStore)

    def test_unknown_backend(self) -> None:
        with pytest.raises(ValueError, match="Supported backends: 'firestore', 'memory'"):
            create_document_store("sqlite")

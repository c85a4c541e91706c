"""Tests for the in-memory document store."""

import pytest

from src.adapters.memory_document_store import (
    AUTO_ID_LENGTH,
    MemoryDocumentStore,
    deep_merge,
    matches,
)
from src.ports.document_store import QueryOperator


class TestConnection:
    async def test_operations_require_connect(self) -> None:
        store = MemoryDocumentStore()
        with pytest.raises(RuntimeError, match="not connected"):
            await store.get_all("favorites")

    async def test_context_manager_connects_and_closes(self) -> None:
        store = MemoryDocumentStore()
        async with store:
            await store.add("favorites", {"a": 1})
        with pytest.raises(RuntimeError):
            await store.add("favorites", {"a": 2})


class TestAddAndRead:
    async def test_add_assigns_unique_ids(self, memory_store) -> None:
        ids = {await memory_store.add("favorites", {"n": n}) for n in range(25)}
        assert len(ids) == 25
        assert all(len(doc_id) == AUTO_ID_LENGTH and doc_id.isalnum() for doc_id in ids)

    async def test_get_all_sorted_by_id(self, memory_store) -> None:
        for n in range(5):
            await memory_store.add("favorites", {"n": n})
        snapshots = await memory_store.get_all("favorites")
        assert [s.id for s in snapshots] == sorted(s.id for s in snapshots)

    async def test_unknown_collection_is_empty(self, memory_store) -> None:
        assert await memory_store.get_all("nothing-here") == []

    async def test_stored_payload_is_a_copy(self, memory_store) -> None:
        payload = {"tags": ["a"]}
        await memory_store.add("favorites", payload)
        payload["tags"].append("b")
        snapshot = (await memory_store.get_all("favorites"))[0]
        assert snapshot.fields == {"tags": ["a"]}

        snapshot.fields["tags"].append("c")
        assert (await memory_store.get_all("favorites"))[0].fields == {"tags": ["a"]}

    async def test_collections_are_separate(self, memory_store) -> None:
        await memory_store.add("favorites", {"n": 1})
        assert memory_store.document_count("favorites") == 1
        assert memory_store.document_count("watchlist") == 0


class TestDelete:
    async def test_delete_removes_document(self, memory_store) -> None:
        doc_id = await memory_store.add("favorites", {"n": 1})
        await memory_store.delete("favorites", doc_id)
        assert await memory_store.get_all("favorites") == []

    async def test_delete_missing_is_not_an_error(self, memory_store) -> None:
        await memory_store.delete("favorites", "does-not-exist")


class TestQuery:
    @pytest.fixture
    async def populated(self, memory_store):
        await memory_store.add("movies", {"title": "A", "year": 1999, "genres": ["sf"], "meta": {"lang": "en"}})
        await memory_store.add("movies", {"title": "B", "year": 2010, "genres": ["sf", "heist"]})
        await memory_store.add("movies", {"title": "C", "year": "2010", "genres": []})
        await memory_store.add("movies", {"title": "D", "year": None})
        await memory_store.add("movies", {"title": "E"})
        return memory_store

    async def _titles(self, store, field, op, value) -> list[str]:
        snapshots = await store.query("movies", field, QueryOperator.parse(op), value)
        return sorted(s.fields["title"] for s in snapshots)

    async def test_equal(self, populated) -> None:
        assert await self._titles(populated, "year", "==", 2010) == ["B"]

    async def test_not_equal_excludes_missing_and_null(self, populated) -> None:
        assert await self._titles(populated, "year", "!=", 2010) == ["A", "C"]

    async def test_range_only_matches_same_type(self, populated) -> None:
        assert await self._titles(populated, "year", ">=", 2000) == ["B"]
        assert await self._titles(populated, "year", "<", 2000) == ["A"]

    async def test_in_and_not_in(self, populated) -> None:
        assert await self._titles(populated, "year", "in", [1999, "2010"]) == ["A", "C"]
        assert await self._titles(populated, "year", "not-in", [1999]) == ["B", "C"]

    async def test_array_contains(self, populated) -> None:
        assert await self._titles(populated, "genres", "array-contains", "heist") == ["B"]
        assert await self._titles(populated, "genres", "array-contains-any", ["sf", "x"]) == ["A", "B"]

    async def test_dotted_field_path(self, populated) -> None:
        assert await self._titles(populated, "meta.lang", "==", "en") == ["A"]

    async def test_list_operator_needs_list(self, populated) -> None:
        with pytest.raises(ValueError, match="requires a list"):
            await populated.query("movies", "year", QueryOperator.IN, 1999)

    async def test_query_results_carry_ids(self, memory_store) -> None:
        doc_id = await memory_store.add("favorites", {"userId": "u1"})
        snapshots = await memory_store.query("favorites", "userId", QueryOperator.EQUAL, "u1")
        assert [s.id for s in snapshots] == [doc_id]


class TestSetMerge:
    async def test_merges_into_existing(self, memory_store) -> None:
        doc_id = await memory_store.add("favorites", {"title": "A", "meta": {"x": 1, "y": 2}})
        await memory_store.set_merge("favorites", doc_id, {"rating": 9, "meta": {"y": 3}})
        snapshot = (await memory_store.get_all("favorites"))[0]
        assert snapshot.fields == {"title": "A", "rating": 9, "meta": {"x": 1, "y": 3}}

    async def test_creates_missing_document(self, memory_store) -> None:
        await memory_store.set_merge("favorites", "fixed-id", {"a": 1})
        snapshot = (await memory_store.get_all("favorites"))[0]
        assert snapshot.id == "fixed-id"
        assert snapshot.fields == {"a": 1}


class TestHelpers:
    def test_matches_missing_field(self) -> None:
        assert not matches({}, "a", QueryOperator.NOT_EQUAL, 1)

    def test_bool_is_not_a_number(self) -> None:
        assert not matches({"a": True}, "a", QueryOperator.GREATER_THAN, 0)

    def test_deep_merge_replaces_non_dicts(self) -> None:
        target = {"a": {"b": 1}, "c": [1]}
        assert deep_merge(target, {"a": 5, "c": [2]}) == {"a": 5, "c": [2]}

    def test_equality_is_type_strict(self) -> None:
        assert not matches({"flag": True}, "flag", QueryOperator.EQUAL, 1)
        assert not matches({"year": 0}, "year", QueryOperator.EQUAL, False)
        assert matches({"year": 1999}, "year", QueryOperator.EQUAL, 1999.0)
        assert matches({"flag": True}, "flag", QueryOperator.NOT_EQUAL, 1)

    def test_membership_is_type_strict(self) -> None:
        assert not matches({"n": 1}, "n", QueryOperator.IN, [True, "1"])
        assert matches({"n": 1}, "n", QueryOperator.NOT_IN, [True, "1"])
        assert not matches({"tags": [True]}, "tags", QueryOperator.ARRAY_CONTAINS, 1)
        assert not matches({"tags": [0]}, "tags", QueryOperator.ARRAY_CONTAINS_ANY, [False])
        assert matches({"tags": [[1, 2]]}, "tags", QueryOperator.ARRAY_CONTAINS, [1, 2])
        assert not matches({"tags": [[1, True]]}, "tags", QueryOperator.ARRAY_CONTAINS, [1, 1])

"""Shared pytest fixtures for marquee tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from src.adapters.memory_document_store import MemoryDocumentStore
from src.core.gateway import DocumentStoreGateway
from src.core.library import UserLibrary
from src.core.media import MediaItem, Movie, TVShow
from tests.mocks.banner import RecordingNavigator, RecordingSurface


@pytest_asyncio.fixture
async def memory_store() -> AsyncGenerator[MemoryDocumentStore, None]:
    """Provide a connected, empty in-memory document store."""
    async with MemoryDocumentStore() as store:
        yield store


@pytest.fixture
def gateway(memory_store: MemoryDocumentStore) -> DocumentStoreGateway:
    """Provide a gateway over the in-memory store."""
    return DocumentStoreGateway(memory_store)


@pytest.fixture
def library(gateway: DocumentStoreGateway) -> UserLibrary:
    return UserLibrary(gateway)


@pytest.fixture
def sample_media() -> list[MediaItem]:
    """Two movies and a TV show, in banner order.

    Returns:
        list[MediaItem]: Items with backdrops and ratings filled in.
    """
    return [
        Movie(id=603, title="The Matrix", vote_average=8.2, backdrop_path="/matrix.jpg"),
        TVShow(id=1399, title="Game of Thrones", vote_average=8.44, backdrop_path="/got.jpg"),
        Movie(id=27205, title="Inception", vote_average=8.35, backdrop_path=None),
    ]


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()

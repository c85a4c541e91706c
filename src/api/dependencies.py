"""FastAPI dependency injection for the store, library and catalog.

Example:
    from fastapi import Depends
    from src.api.dependencies import get_library
    from src.core.library import UserLibrary

    @router.get("/users/{user_id}/favorites")
    async def favorites(user_id: str, library: UserLibrary = Depends(get_library)):
        ...
"""

from collections.abc import AsyncGenerator

from src.adapters import DocumentStoreType, create_document_store
from src.core.gateway import DocumentStoreGateway
from src.core.library import UserLibrary
from src.core.logging import get_logger
from src.providers.tmdb_provider import TMDBProvider

logger = get_logger(__name__)


class AppState:
    """Application state container for shared resources.

    Holds the single document store connection and the objects built on it,
    shared by every request handler.
    """

    def __init__(self) -> None:
        self._store: DocumentStoreType | None = None
        self._gateway: DocumentStoreGateway | None = None
        self._library: UserLibrary | None = None
        self._catalog: TMDBProvider | None = None
        self._backend: str | None = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def backend(self) -> str | None:
        return self._backend

    async def initialize(
        self,
        store_backend: str = "firestore",
        firestore_project: str | None = None,
        firestore_database: str | None = None,
        tmdb_access_token: str | None = None,
    ) -> None:
        """Create the document store, gateway, library and catalog client.

        Args:
            store_backend: "firestore" or "memory".
            firestore_project: Google Cloud project for Firestore.
            firestore_database: Firestore database id.
            tmdb_access_token: TMDB token (or None to use the env var).
        """
        if self._initialized:
            logger.warning("app_state_already_initialized")
            return

        self._store = create_document_store(
            store_backend,
            project=firestore_project,
            database=firestore_database,
        )
        await self._store.connect()
        self._backend = store_backend
        self._gateway = DocumentStoreGateway(self._store)
        self._library = UserLibrary(self._gateway)
        logger.info("document_store_initialized", backend=store_backend)

        self._catalog = TMDBProvider(access_token=tmdb_access_token)
        logger.info("catalog_initialized", configured=self._catalog.is_configured)

        self._initialized = True
        logger.info("app_state_initialized")

    async def shutdown(self) -> None:
        """Clean up resources on shutdown."""
        if self._store is not None:
            await self._store.close()
            logger.info("document_store_closed")
        self._initialized = False
        logger.info("app_state_shutdown")

    @property
    def gateway(self) -> DocumentStoreGateway:
        if self._gateway is None:
            raise RuntimeError("App state not initialized")
        return self._gateway

    @property
    def library(self) -> UserLibrary:
        if self._library is None:
            raise RuntimeError("App state not initialized")
        return self._library

    @property
    def catalog(self) -> TMDBProvider:
        if self._catalog is None:
            raise RuntimeError("App state not initialized")
        return self._catalog


_app_state = AppState()


def get_app_state() -> AppState:
    """Get the global app state instance."""
    return _app_state


async def get_gateway() -> AsyncGenerator[DocumentStoreGateway, None]:
    """FastAPI dependency for the document store gateway."""
    yield _app_state.gateway


async def get_library() -> AsyncGenerator[UserLibrary, None]:
    """FastAPI dependency for the user library."""
    yield _app_state.library


async def get_catalog() -> AsyncGenerator[TMDBProvider, None]:
    """FastAPI dependency for the catalog provider."""
    yield _app_state.catalog

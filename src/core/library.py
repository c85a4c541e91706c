"""Per-user media lists (favorites, watchlist) stored through the gateway."""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any
from urllib.parse import quote

from src.core.errors import ErrorCategory, StoreError
from src.core.gateway import DocumentStoreGateway, StoreResult
from src.core.logging import get_logger
from src.core.media import MediaItem, MediaKind, Movie, TVShow

logger = get_logger(__name__)

MIN_USER_RATING = 0.0
MAX_USER_RATING = 10.0


class LibraryList(Enum):
    """A user list; the value is its collection name."""

    FAVORITES = "favorites"
    WATCHLIST = "watchlist"


@dataclass
class LibraryEntry:
    """One media item saved to a user's list."""

    entry_id: str
    user_id: str
    media_id: int
    media_kind: MediaKind
    title: str
    backdrop_path: str | None = None
    vote_average: float = 0.0
    added_at: str = ""
    user_rating: float | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "LibraryEntry":
        """Build an entry from a query record (payload plus ``id``)."""
        return cls(
            entry_id=str(record["id"]),
            user_id=str(record["userId"]),
            media_id=int(record["mediaId"]),
            media_kind=MediaKind(record.get("mediaKind", MediaKind.MOVIE.value)),
            title=str(record.get("title") or ""),
            backdrop_path=record.get("backdropPath"),
            vote_average=float(record.get("voteAverage") or 0.0),
            added_at=str(record.get("addedAt") or ""),
            user_rating=record.get("userRating"),
        )

    def to_media_item(self) -> MediaItem:
        media_cls = TVShow if self.media_kind is MediaKind.TV else Movie
        return media_cls(
            id=self.media_id,
            title=self.title,
            vote_average=self.vote_average,
            backdrop_path=self.backdrop_path,
        )


def entry_key(user_id: str, item: MediaItem) -> str:
    """Document id of ``item`` on ``user_id``'s list.

    One id per (user, kind, media id), so saving the same item twice, even
    concurrently, writes to a single document.
    """
    return f"{quote(user_id, safe='')}_{item.kind.value}_{item.id}"


def entry_payload(user_id: str, item: MediaItem, added_at: datetime | None = None) -> dict[str, Any]:
    """Stored document for ``item`` on ``user_id``'s list."""
    return {
        "userId": user_id,
        "mediaId": item.id,
        "mediaKind": item.kind.value,
        "title": item.title,
        "backdropPath": item.backdrop_path,
        "voteAverage": item.vote_average,
        "addedAt": (added_at or datetime.now(UTC)).isoformat(),
    }


class UserLibrary:
    """Favorites and watchlist operations for a user.

    Every method returns a StoreResult; store failures come back as errors
    instead of exceptions.
    """

    def __init__(self, gateway: DocumentStoreGateway) -> None:
        self._gateway = gateway

    async def _records(self, user_id: str, list_name: LibraryList) -> StoreResult[list[dict[str, Any]]]:
        return await self._gateway.list_by_query(list_name.value, "userId", "==", user_id)

    @staticmethod
    def _matching(
        records: list[dict[str, Any]], media_id: int, media_kind: MediaKind
    ) -> list[dict[str, Any]]:
        return [
            record
            for record in records
            if record.get("mediaId") == media_id
            and record.get("mediaKind", MediaKind.MOVIE.value) == media_kind.value
        ]

    async def entries(
        self, user_id: str, list_name: LibraryList
    ) -> StoreResult[list[LibraryEntry]]:
        """A user's entries on one list, most recently added first."""
        result = await self._records(user_id, list_name)
        if result.error is not None:
            return StoreResult.failure(result.error)
        entries: list[LibraryEntry] = []
        for record in result.value or []:
            try:
                entries.append(LibraryEntry.from_record(record))
            except (KeyError, TypeError, ValueError) as ex:
                # The store never validates payloads; skip foreign documents.
                logger.warning(
                    "library_record_malformed",
                    user_id=user_id,
                    list=list_name.value,
                    document_id=record.get("id"),
                    error=repr(ex),
                )
        entries.sort(key=lambda entry: entry.added_at, reverse=True)
        return StoreResult.success(entries)

    async def contains(
        self,
        user_id: str,
        media_id: int,
        media_kind: MediaKind,
        list_name: LibraryList,
    ) -> StoreResult[bool]:
        result = await self._records(user_id, list_name)
        if result.error is not None:
            return StoreResult.failure(result.error)
        return StoreResult.success(bool(self._matching(result.value or [], media_id, media_kind)))

    async def add(self, user_id: str, item: MediaItem, list_name: LibraryList) -> StoreResult[None]:
        """Save ``item`` to the list. Adding an item already present is a no-op.

        The entry is written under ``entry_key`` with a merge, so two saves
        racing past the presence check still leave a single document.
        """
        present = await self.contains(user_id, item.id, item.kind, list_name)
        if present.error is not None:
            return StoreResult.failure(present.error)
        if present.value:
            logger.debug(
                "library_entry_exists",
                user_id=user_id,
                list=list_name.value,
                media_id=item.id,
            )
            return StoreResult.success(None)

        result = await self._gateway.update(
            entry_key(user_id, item), entry_payload(user_id, item), list_name.value
        )
        if result.ok:
            logger.info(
                "library_entry_added",
                user_id=user_id,
                list=list_name.value,
                media_id=item.id,
                media_kind=item.kind.value,
            )
        return result

    async def remove(
        self,
        user_id: str,
        media_id: int,
        media_kind: MediaKind,
        list_name: LibraryList,
    ) -> StoreResult[int]:
        """Delete every entry for the item. The value is how many were removed."""
        result = await self._records(user_id, list_name)
        if result.error is not None:
            return StoreResult.failure(result.error)

        removed = 0
        for record in self._matching(result.value or [], media_id, media_kind):
            deleted = await self._gateway.delete(str(record["id"]), list_name.value)
            if deleted.error is not None:
                return StoreResult.failure(deleted.error)
            removed += 1

        logger.info(
            "library_entry_removed",
            user_id=user_id,
            list=list_name.value,
            media_id=media_id,
            removed=removed,
        )
        return StoreResult.success(removed)

    async def rate(
        self,
        user_id: str,
        entry_id: str,
        rating: float,
        list_name: LibraryList,
    ) -> StoreResult[None]:
        """Attach the user's own rating to one of their entries."""
        if not MIN_USER_RATING <= rating <= MAX_USER_RATING:
            return StoreResult.failure(
                StoreError(
                    message=(
                        f"Rating must be between {MIN_USER_RATING:g} and "
                        f"{MAX_USER_RATING:g}, got {rating}"
                    ),
                    kind=ErrorCategory.INVALID_INPUT,
                    operation="update",
                    collection=list_name.value,
                )
            )
        result = await self._records(user_id, list_name)
        if result.error is not None:
            return StoreResult.failure(result.error)
        if not any(str(record["id"]) == entry_id for record in result.value or []):
            return StoreResult.failure(
                StoreError(
                    message=f"No {list_name.value} entry {entry_id!r} for user {user_id!r}",
                    kind=ErrorCategory.NOT_FOUND,
                    operation="update",
                    collection=list_name.value,
                )
            )
        return await self._gateway.update(entry_id, {"userRating": rating}, list_name.value)

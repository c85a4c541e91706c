"""User list routes (favorites and watchlist)."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import get_library
from src.api.schemas import (
    ErrorResponse,
    LibraryEntryResponse,
    LibraryItemCreate,
    LibraryListResponse,
    LibraryRatingUpdate,
)
from src.core.errors import ErrorCategory, StoreError
from src.core.library import LibraryList, UserLibrary
from src.core.logging import bind_contextvars, clear_contextvars, get_logger
from src.core.media import MediaKind

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["library"])

STORE_ERROR_STATUS = {
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCategory.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCategory.TIMEOUT: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCategory.NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCategory.SERVICE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}

ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    403: {"model": ErrorResponse, "description": "Store denied access"},
    503: {"model": ErrorResponse, "description": "Store unavailable"},
}


def store_error_to_http(error: StoreError) -> HTTPException:
    """Translate a gateway error into an HTTP error response."""
    status_code = STORE_ERROR_STATUS.get(
        error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return HTTPException(
        status_code=status_code,
        detail={
            "error": f"{error.operation} on {error.collection} failed",
            "detail": error.message,
            "code": error.kind.name,
        },
    )


@router.get(
    "/{user_id}/{list_name}",
    response_model=LibraryListResponse,
    responses=ERROR_RESPONSES,
)
async def list_entries(
    user_id: str,
    list_name: LibraryList,
    library: UserLibrary = Depends(get_library),
) -> LibraryListResponse:
    """A user's entries on one list, newest first."""
    result = await library.entries(user_id, list_name)
    if result.error is not None:
        raise store_error_to_http(result.error)
    return LibraryListResponse(
        user_id=user_id,
        list_name=list_name.value,
        entries=[LibraryEntryResponse.from_entry(entry) for entry in result.value or []],
    )


@router.post(
    "/{user_id}/{list_name}",
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def add_entry(
    user_id: str,
    list_name: LibraryList,
    request: LibraryItemCreate,
    library: UserLibrary = Depends(get_library),
) -> dict[str, object]:
    """Save a catalog item to a list. Saving an item twice keeps one entry."""
    bind_contextvars(user_id=user_id, list_name=list_name.value)
    try:
        result = await library.add(user_id, request.to_media_item(), list_name)
        if result.error is not None:
            raise store_error_to_http(result.error)
        return {
            "saved": True,
            "list_name": list_name.value,
            "media_id": request.media_id,
            "media_kind": request.media_kind.value,
        }
    finally:
        clear_contextvars()


@router.delete(
    "/{user_id}/{list_name}/{media_kind}/{media_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse, "description": "Item not on the list"}, **ERROR_RESPONSES},
)
async def remove_entry(
    user_id: str,
    list_name: LibraryList,
    media_kind: MediaKind,
    media_id: int,
    library: UserLibrary = Depends(get_library),
) -> Response:
    """Remove an item from a list."""
    bind_contextvars(user_id=user_id, list_name=list_name.value)
    try:
        result = await library.remove(user_id, media_id, media_kind, list_name)
        if result.error is not None:
            raise store_error_to_http(result.error)
        if not result.value:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={
                    "error": "Item not on the list",
                    "detail": f"{media_kind.value} {media_id} is not in {list_name.value}",
                    "code": ErrorCategory.NOT_FOUND.name,
                },
            )
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    finally:
        clear_contextvars()


@router.patch(
    "/{user_id}/{list_name}/entries/{entry_id}",
    responses={404: {"model": ErrorResponse, "description": "Entry not found"}, **ERROR_RESPONSES},
)
async def rate_entry(
    user_id: str,
    list_name: LibraryList,
    entry_id: str,
    request: LibraryRatingUpdate,
    library: UserLibrary = Depends(get_library),
) -> dict[str, object]:
    """Set the user's own rating on an entry."""
    result = await library.rate(user_id, entry_id, request.user_rating, list_name)
    if result.error is not None:
        raise store_error_to_http(result.error)
    logger.info("library_entry_rated", user_id=user_id, entry_id=entry_id)
    return {"entry_id": entry_id, "user_rating": request.user_rating}

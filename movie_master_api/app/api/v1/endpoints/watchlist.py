"""
Watchlist endpoints.

All routes require a verified ID token.  Routes addressing a watchlist
through the ``addedBy`` path segment only serve the authenticated
user's own list; any other owner is answered with 403 before the
database is touched.  The paths keep the names used by the existing
web client.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Response, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from movie_master_api.app.core.db import get_database
from movie_master_api.app.core.errors import BadRequest, NotFound
from movie_master_api.app.core.security import Identity, ensure_owner, get_current_identity
from movie_master_api.app.schemas.movie import DeleteRead
from movie_master_api.app.schemas.watchlist import MembershipRead
from movie_master_api.app.services.watchlist_service import (
    InvalidWatchlistEntryError,
    WatchlistEntryNotFoundError,
    WatchlistService,
)

router = APIRouter()


def get_watchlist_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> WatchlistService:
    return WatchlistService(db)


def require_list_owner(addedBy: str, identity: Identity = Depends(get_current_identity)) -> Identity:
    """Dependency allowing access only to the caller's own watchlist."""
    ensure_owner(identity, addedBy)
    return identity


@router.post("/watchListInsert", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def add_to_watchlist(
    response: Response,
    payload: Dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    """Add a movie to the caller's watchlist.

    ``addedBy`` is always the authenticated user, whatever the body
    says.  Adding a movie that is already listed returns the existing
    entry with status 200.
    """
    try:
        entry, created = await service.add_entry(identity.uid, payload)
    except InvalidWatchlistEntryError as e:
        raise BadRequest(f"Invalid watchlist entry: {e}") from e
    if not created:
        response.status_code = status.HTTP_200_OK
    return entry


@router.get("/myWatchList/{addedBy}", response_model=List[Dict[str, Any]])
async def list_watchlist(
    addedBy: str,
    identity: Identity = Depends(require_list_owner),
    service: WatchlistService = Depends(get_watchlist_service),
) -> List[Dict[str, Any]]:
    """Return the caller's watchlist (an empty list when nothing is saved)."""
    return await service.list_entries(addedBy)


@router.delete("/watchListDelete/{addedBy}/{movieId}", response_model=DeleteRead)
async def remove_from_watchlist(
    addedBy: str,
    movieId: str,
    identity: Identity = Depends(require_list_owner),
    service: WatchlistService = Depends(get_watchlist_service),
) -> Dict[str, Any]:
    try:
        return await service.remove_entry(addedBy, movieId)
    except WatchlistEntryNotFoundError as e:
        raise NotFound(extra={"success": False}) from e


@router.get("/watchlist/check/{addedBy}/{movieId}", response_model=MembershipRead)
async def check_watchlist(
    addedBy: str,
    movieId: str,
    identity: Identity = Depends(require_list_owner),
    service: WatchlistService = Depends(get_watchlist_service),
) -> MembershipRead:
    """Tell whether ``movieId`` is on the caller's watchlist."""
    return MembershipRead(inWatchlist=await service.contains(addedBy, movieId))

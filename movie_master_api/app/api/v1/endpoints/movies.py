"""
Movie endpoints.

Reading the catalogue is public; creating, updating and deleting
movies requires a verified Firebase ID token.  Movie bodies are
free‑form JSON objects and are stored as sent, apart from the
server‑managed ``id``, ``createdAt`` and ``updatedAt`` fields.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from movie_master_api.app.core.db import get_database
from movie_master_api.app.core.errors import NotFound
from movie_master_api.app.core.security import Identity, get_current_identity
from movie_master_api.app.schemas.movie import DeleteRead, MessageRead
from movie_master_api.app.services.movie_service import MovieNotFoundError, MovieService

router = APIRouter()


def get_movie_service(db: AsyncIOMotorDatabase = Depends(get_database)) -> MovieService:
    return MovieService(db)


@router.get("/movies", response_model=List[Dict[str, Any]])
async def list_movies(service: MovieService = Depends(get_movie_service)) -> List[Dict[str, Any]]:
    """Return every movie in storage order."""
    return await service.list_movies()


@router.get("/movies/{movie_id}", response_model=Dict[str, Any])
async def get_movie(movie_id: str, service: MovieService = Depends(get_movie_service)) -> Dict[str, Any]:
    """Return a single movie; 404 if the id is unknown or malformed."""
    try:
        return await service.get_movie(movie_id)
    except MovieNotFoundError as e:
        raise NotFound() from e


@router.post("/movies", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def create_movie(
    payload: Dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    service: MovieService = Depends(get_movie_service),
) -> Dict[str, Any]:
    """Create a movie and return it including its generated ``id``."""
    return await service.create_movie(payload, created_by=identity.uid)


@router.put("/movies/{movie_id}", response_model=MessageRead)
async def update_movie(
    movie_id: str,
    payload: Dict[str, Any] = Body(...),
    identity: Identity = Depends(get_current_identity),
    service: MovieService = Depends(get_movie_service),
) -> Dict[str, str]:
    """Merge the supplied fields into an existing movie.

    Fields that are not part of the body keep their stored values.
    """
    try:
        return await service.update_movie(movie_id, payload)
    except MovieNotFoundError as e:
        raise NotFound() from e


@router.delete("/movies/{movie_id}", response_model=DeleteRead)
async def delete_movie(
    movie_id: str,
    identity: Identity = Depends(get_current_identity),
    service: MovieService = Depends(get_movie_service),
) -> Dict[str, Any]:
    try:
        return await service.delete_movie(movie_id)
    except MovieNotFoundError as e:
        raise NotFound(extra={"success": False}) from e

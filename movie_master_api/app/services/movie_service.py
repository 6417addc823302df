"""
Business logic for movies.

Movies are stored as free‑form documents in the ``movies`` collection.
Each method performs exactly one MongoDB operation; MongoDB failures
are logged and surfaced as 500 responses by ``store_errors``.  Unknown
ids raise ``MovieNotFoundError``, which the endpoints turn into 404.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping

from motor.motor_asyncio import AsyncIOMotorDatabase

from ..core.db import MOVIES_COLLECTION, store_errors
from ..schemas.document import parse_object_id, strip_server_fields, to_public

logger = logging.getLogger(__name__)


class MovieNotFoundError(ValueError):
    """No movie matches the given id."""


class MovieService:
    """CRUD operations on the movie catalogue."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[MOVIES_COLLECTION]

    @staticmethod
    def _object_id(movie_id: str):
        # Ids that are not ObjectIds cannot exist, report them as missing.
        try:
            return parse_object_id(movie_id)
        except ValueError as exc:
            raise MovieNotFoundError(movie_id) from exc

    async def list_movies(self) -> List[Dict[str, Any]]:
        with store_errors("listing movies"):
            documents = await self._collection.find().to_list(length=None)
        return [to_public(doc) for doc in documents]

    async def get_movie(self, movie_id: str) -> Dict[str, Any]:
        object_id = self._object_id(movie_id)
        with store_errors("loading a movie"):
            document = await self._collection.find_one({"_id": object_id})
        if document is None:
            raise MovieNotFoundError(movie_id)
        return to_public(document)

    async def create_movie(self, payload: Mapping[str, Any], created_by: str = "") -> Dict[str, Any]:
        """Store a new movie and return it with its assigned ``id``."""
        movie = strip_server_fields(payload)
        movie["createdAt"] = datetime.now(timezone.utc)
        with store_errors("creating a movie"):
            result = await self._collection.insert_one(movie)
        logger.info("User %s created movie %s", created_by or "-", result.inserted_id)
        return to_public({"_id": result.inserted_id, **movie})

    async def update_movie(self, movie_id: str, payload: Mapping[str, Any]) -> Dict[str, str]:
        """Merge ``payload`` into an existing movie.

        Only the supplied fields change; ``updatedAt`` is refreshed.
        Raises ``MovieNotFoundError`` when no movie has this id.
        """
        object_id = self._object_id(movie_id)
        changes = strip_server_fields(payload)
        changes["updatedAt"] = datetime.now(timezone.utc)
        with store_errors("updating a movie"):
            result = await self._collection.update_one({"_id": object_id}, {"$set": changes})
        if result.matched_count == 0:
            raise MovieNotFoundError(movie_id)
        return {"message": "Updated"}

    async def delete_movie(self, movie_id: str) -> Dict[str, Any]:
        object_id = self._object_id(movie_id)
        with store_errors("deleting a movie"):
            result = await self._collection.delete_one({"_id": object_id})
        if result.deleted_count == 0:
            raise MovieNotFoundError(movie_id)
        return {"success": True, "message": "Deleted"}

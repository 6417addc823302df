"""
Business logic for per‑user watchlists.

Entries live in the ``watchList`` collection and are addressed by the
pair ``(addedBy, movieId)``.  Ownership is checked by the endpoints
before any method here is called; the service trusts the ``owner`` it
receives.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Tuple

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError
from pymongo import ReturnDocument

from ..core.db import WATCHLIST_COLLECTION, store_errors
from ..schemas.document import to_public
from ..schemas.watchlist import build_entry_document

logger = logging.getLogger(__name__)


class InvalidWatchlistEntryError(ValueError):
    """The submitted entry lacks a usable ``movieId``."""


class WatchlistEntryNotFoundError(ValueError):
    """No entry matches the given owner and movie."""


class WatchlistService:
    """Add, list, check and remove watchlist entries."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[WATCHLIST_COLLECTION]

    async def add_entry(self, owner: str, payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """Add a movie to ``owner``'s watchlist.

        The pair ``(owner, movieId)`` is unique: adding a movie that is
        already on the list returns the stored entry unchanged.  Returns
        the entry and whether it was newly created.
        """
        try:
            entry = build_entry_document(payload)
        except ValidationError as exc:
            first = exc.errors()[0]
            raise InvalidWatchlistEntryError(first.get("msg", "invalid value")) from exc
        entry["addedBy"] = owner
        entry["createdAt"] = datetime.now(timezone.utc)
        entry["_id"] = ObjectId()

        with store_errors("adding a watchlist entry"):
            existing = await self._collection.find_one_and_update(
                {"addedBy": owner, "movieId": entry["movieId"]},
                {"$setOnInsert": entry},
                upsert=True,
                return_document=ReturnDocument.BEFORE,
            )
        if existing is not None:
            return to_public(existing), False
        logger.info("User %s added movie %s to watchlist", owner, entry["movieId"])
        return to_public(entry), True

    async def list_entries(self, owner: str) -> List[Dict[str, Any]]:
        """Return every entry of ``owner``; an empty list if there are none."""
        with store_errors("listing a watchlist"):
            documents = await self._collection.find({"addedBy": owner}).to_list(length=None)
        return [to_public(doc) for doc in documents]

    async def remove_entry(self, owner: str, movie_id: str) -> Dict[str, Any]:
        with store_errors("removing a watchlist entry"):
            result = await self._collection.delete_one({"addedBy": owner, "movieId": movie_id})
        if result.deleted_count == 0:
            raise WatchlistEntryNotFoundError(f"{owner}/{movie_id}")
        logger.info("User %s removed movie %s from watchlist", owner, movie_id)
        return {"success": True, "message": "Removed from watchlist"}

    async def contains(self, owner: str, movie_id: str) -> bool:
        with store_errors("checking a watchlist"):
            count = await self._collection.count_documents({"addedBy": owner, "movieId": movie_id}, limit=1)
        return count > 0

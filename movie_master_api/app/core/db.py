"""
MongoDB connection management.

The ``ConnectionManager`` owns the single motor client used by the
whole process.  The client is created lazily on the first call to
``get_connection`` and the resulting database handle is reused for
every later request.  Establishment is single‑flight: while the first
attempt is in progress, concurrent callers await the same attempt and
observe its outcome instead of opening their own clients.  A failed
attempt is not remembered, so the next call starts over.

The manager is created by the application factory and stored on
``app.state``; request handlers obtain the database through the
``get_database`` dependency rather than through a module global.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import OperationFailure, PyMongoError
from pymongo.server_api import ServerApi

from .errors import InternalError

logger = logging.getLogger(__name__)

MOVIES_COLLECTION = "movies"
WATCHLIST_COLLECTION = "watchList"


def _default_client_factory(uri: str) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        uri,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )


class ConnectionManager:
    """Lazily established, memoized MongoDB database handle.

    Parameters
    ----------
    uri : str
        MongoDB connection string.
    database_name : str
        Name of the database holding the ``movies`` and ``watchList``
        collections.
    client_factory : Optional[Callable]
        Callable building a client from ``uri``.  Defaults to a motor
        client pinned to the stable server API version 1.
    """

    def __init__(
        self,
        uri: str,
        database_name: str,
        client_factory: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._uri = uri
        self._database_name = database_name
        self._client_factory = client_factory or _default_client_factory
        self._client: Any = None
        self._database: Optional[AsyncIOMotorDatabase] = None
        self._pending: Optional[asyncio.Future] = None

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    async def get_connection(self) -> AsyncIOMotorDatabase:
        """Return the shared database handle, connecting on first use."""
        if self._database is not None:
            return self._database
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._establish())
            self._pending.add_done_callback(_retrieve_outcome)
        # Shield so that a cancelled request does not cancel the attempt
        # other callers are waiting on.
        return await asyncio.shield(self._pending)

    async def _establish(self) -> AsyncIOMotorDatabase:
        logger.info("Connecting to MongoDB database '%s'", self._database_name)
        client = None
        try:
            client = self._client_factory(self._uri)
            await client.admin.command("ping")
            database = client[self._database_name]
            await self._ensure_indexes(database)
        except BaseException as exc:
            if not isinstance(exc, asyncio.CancelledError):
                logger.exception("MongoDB connection failed")
            if client is not None:
                client.close()
            # Forget the failed attempt so the next caller starts over, unless
            # close() already replaced it.
            if self._pending is asyncio.current_task():
                self._pending = None
            raise
        self._client = client
        self._database = database
        logger.info("MongoDB connected")
        return database

    async def _ensure_indexes(self, database: AsyncIOMotorDatabase) -> None:
        # One entry per (owner, movie) pair.  Existing duplicates make the
        # build fail; the API still works, inserts are just not guarded.
        try:
            await database[WATCHLIST_COLLECTION].create_index(
                [("addedBy", ASCENDING), ("movieId", ASCENDING)],
                unique=True,
                name="addedBy_movieId_unique",
            )
        except OperationFailure as exc:
            logger.warning("Could not create unique watchlist index: %s", exc)

    def close(self) -> None:
        """Close the client, if any, and abandon an attempt in flight.

        A later call reconnects.
        """
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._client = None
        self._database = None
        self._pending = None


def _retrieve_outcome(task: "asyncio.Future") -> None:
    # Marks a failure as seen when every waiter was cancelled before it ended.
    if not task.cancelled():
        task.exception()


@contextmanager
def store_errors(action: str) -> Iterator[None]:
    """Log MongoDB failures raised inside the block and re‑raise them as 500."""
    try:
        yield
    except PyMongoError as exc:
        logger.exception("MongoDB error while %s", action)
        raise InternalError() from exc


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connection_manager


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """FastAPI dependency returning the shared database handle.

    Connection failures are logged by the manager and reported to the
    client as a generic server error.
    """
    manager = get_connection_manager(request)
    try:
        return await manager.get_connection()
    except PyMongoError as exc:
        raise InternalError() from exc

"""
Top‑level API router.

Aggregates the movie and watchlist routers.  The application mounts it
under ``/api``; the individual routers define their full paths
themselves because the watchlist routes do not share a common prefix.
"""

from fastapi import APIRouter

from .endpoints import movies, watchlist

router = APIRouter()

router.include_router(movies.router, tags=["movies"])
router.include_router(watchlist.router, tags=["watchlist"])

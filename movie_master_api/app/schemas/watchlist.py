"""
Pydantic models for watchlist entries.

A watchlist entry is an open JSON object like a movie.  The only client
field the server relies on is ``movieId``, which ``WatchlistEntryCreate``
validates; everything else passes through untouched.  The owner
(``addedBy``) is never taken from the body, the service stamps it from
the authenticated identity.
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field, field_validator

from .document import strip_server_fields


class WatchlistEntryCreate(BaseModel):
    movieId: str = Field(..., example="6650f1c2a1b2c3d4e5f60718")

    @field_validator("movieId", mode="before")
    @classmethod
    def _normalise_movie_id(cls, value: Any) -> str:
        # Clients send either the string id or a numeric id.
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ValueError("movieId must be a string")
        value = str(value).strip()
        if not value:
            raise ValueError("movieId must not be empty")
        return value


def build_entry_document(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate ``payload`` and return the fields to store.

    Raises ``pydantic.ValidationError`` when ``movieId`` is missing or
    invalid.
    """
    entry = WatchlistEntryCreate.model_validate(payload)
    document = strip_server_fields(payload)
    document.pop("addedBy", None)
    document["movieId"] = entry.movieId
    return document


class MembershipRead(BaseModel):
    inWatchlist: bool

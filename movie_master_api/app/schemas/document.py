"""
Helpers shared by the movie and watchlist schemas.

Resources are schema‑less: clients may send any JSON object and it is
stored as given.  Only the fields the server manages itself are
stripped from incoming payloads, and stored documents are converted to
JSON‑friendly dictionaries (ObjectId as string under ``id``, datetimes
as ISO strings) before leaving the API.
"""

from typing import Any, Dict, Mapping

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

SERVER_FIELDS = frozenset({"_id", "id", "createdAt", "updatedAt"})


def strip_server_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``payload`` without server‑managed fields."""
    return {key: value for key, value in payload.items() if key not in SERVER_FIELDS}


def to_public(document: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert a stored document into its API representation."""
    data = dict(document)
    object_id = data.pop("_id", None)
    public: Dict[str, Any] = {}
    if object_id is not None:
        public["id"] = str(object_id)
    public.update(data)
    return jsonable_encoder(public, custom_encoder={ObjectId: str})


def parse_object_id(value: str) -> ObjectId:
    """Parse a path id; raises ``ValueError`` for anything that is not one."""
    if not ObjectId.is_valid(value):
        raise ValueError(f"Invalid id: {value!r}")
    return ObjectId(value)

"""
Singers API — Primary-Key Translation
=======================================

What:  Converts the `{id}` path string into the database's native key.
When:  Before any query that filters on a path id.

    embedded model:   "3f2b...": UUID primary key (hex, with or without dashes)
    relational model: "7":      integer artist id in [1, 1000]
"""

import uuid

from app.exceptions import InvalidKeyError

ARTIST_ID_MIN = 1
ARTIST_ID_MAX = 1000


def to_primary_key(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw.strip())
    except (ValueError, AttributeError):
        raise InvalidKeyError(raw, "document id")


def to_artist_id(raw: str) -> int:
    try:
        artist_id = int(raw.strip())
    except (ValueError, AttributeError):
        raise InvalidKeyError(raw, "artist id")
    if not ARTIST_ID_MIN <= artist_id <= ARTIST_ID_MAX:
        raise InvalidKeyError(raw, f"artist id ({ARTIST_ID_MIN}-{ARTIST_ID_MAX})")
    return artist_id

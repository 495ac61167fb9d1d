"""
Singers API — Singer SQLAlchemy Model
=======================================

What:  ORM model for the `singers` collection, one row per singer document.
How:   Scalar fields map to columns; embedded `band_members` sub-documents are
       kept in a JSON column so their shape round-trips untouched.
Who:   Used by the singer services and by Alembic.

Two data models share this table:
    - embedded:   artistname + band_members (JSON)
    - relational: artistname + artist_id (exposed as `id`), band members
                  live in `instruments` and are joined at read time

Document shape (see to_document):
    {"_id": "<uuid>", "artistname": "...", "band_members": [...], "id": 7}
    Keys whose column is NULL are omitted, as a document store would.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Singer(Base):
    """A singer (artist) document."""

    __tablename__ = "singers"

    # Server-assigned primary key, exposed as `_id`
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    artistname: Mapped[str] = mapped_column(String(255), nullable=False)

    # Embedded model only
    band_members: Mapped[Optional[List[Dict[str, Any]]]] = mapped_column(
        JSON,
        nullable=True,
        default=None,
    )

    # Relational model only: the public integer `id` (1–1000)
    artist_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        unique=True,
    )

    # Listing order; not part of the document
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_singers_created_at", "created_at"),
    )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"_id": str(self.id)}
        if self.artist_id is not None:
            document["id"] = self.artist_id
        document["artistname"] = self.artistname
        if self.band_members is not None:
            document["band_members"] = self.band_members
        return document

    def __repr__(self) -> str:
        return f"<Singer(id={self.id}, artistname='{self.artistname}', artist_id={self.artist_id})>"

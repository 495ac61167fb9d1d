"""
Singers API — Instrument SQLAlchemy Model
===========================================

What:  ORM model for the `instruments` collection used by the relational
       data model.
How:   `artist_id` matches `singers.artist_id` by value only. There is no
       foreign-key constraint, so deleting a singer leaves its instruments.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Instrument(Base):
    """One band member of an artist, with the instruments they play."""

    __tablename__ = "instruments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    artist_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    singer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    instruments: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_document(self) -> Dict[str, Any]:
        document: Dict[str, Any] = {"_id": str(self.id), "artist_id": self.artist_id}
        if self.singer_name is not None:
            document["singer_name"] = self.singer_name
        document["instruments"] = list(self.instruments or [])
        return document

    def __repr__(self) -> str:
        return f"<Instrument(id={self.id}, artist_id={self.artist_id})>"

"""
Singers API — Singer Services
===============================

What:  One database operation per public method, for each data model.
How:   Every call is awaited and wrapped: SQLAlchemy and socket (OSError)
       failures roll the session back and come back as
       DbResult(error=<raw text>) instead of raising.
Who:   Called by the singer route handlers.

Data models:
    EmbeddedSingerService    band_members stored in the singer row (JSON)
    RelationalSingerService  band_members = instruments LEFT OUTER JOIN on
                             instruments.artist_id == singers.artist_id

Both address documents through `_key_filter()`: the UUID primary key for the
embedded model, the public integer id for the relational model.
"""

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import DbResult
from app.models import Instrument, Singer
from app.schemas.singer import RelationalSingerCreate, SingerCreate

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class SingerService:
    """
    Operations shared by both data models.

    Update and delete do not check for existence first: a key that matches
    nothing yields DbResult(value=None), which routes return as 200 null.
    """

    model_name = "singer"

    def _key_filter(self, key: Any):
        raise NotImplementedError

    def _column_changes(self, changes: Document) -> Document:
        """Maps document field names to Singer attribute names."""
        return dict(changes)

    async def _guarded(
        self,
        db: AsyncSession,
        operation: str,
        action: Callable[[], Awaitable[Any]],
    ) -> DbResult:
        try:
            return DbResult(value=await action())
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Database error during %s (%s): %s", operation, self.model_name, e)
            return DbResult.failure(e)

    async def _find(self, db: AsyncSession, key: Any) -> Optional[Singer]:
        result = await db.execute(select(Singer).where(self._key_filter(key)))
        return result.scalar_one_or_none()

    async def update_singer(self, db: AsyncSession, key: Any, changes: Document) -> DbResult:
        """
        Merge-patch: overwrite only the provided fields, return the new document.

        Fields absent from `changes` keep their stored values.
        """

        async def action() -> Optional[Document]:
            singer = await self._find(db, key)
            if singer is None:
                return None
            for attribute, value in self._column_changes(changes).items():
                setattr(singer, attribute, value)
            await db.commit()
            logger.info("Updated singer %s: %s", key, sorted(changes))
            return singer.to_document()

        return await self._guarded(db, "update", action)

    async def delete_singer(self, db: AsyncSession, key: Any) -> DbResult:
        """Remove the matching document and return it as it was before deletion."""

        async def action() -> Optional[Document]:
            singer = await self._find(db, key)
            if singer is None:
                return None
            document = singer.to_document()
            await db.delete(singer)
            await db.commit()
            logger.info("Deleted singer %s", key)
            return document

        return await self._guarded(db, "delete", action)


class EmbeddedSingerService(SingerService):
    """Singers whose band members are embedded sub-documents."""

    model_name = "embedded"

    def _key_filter(self, key: uuid.UUID):
        return Singer.id == key

    async def list_singers(self, db: AsyncSession) -> DbResult:
        async def action() -> List[Document]:
            result = await db.execute(select(Singer).order_by(Singer.created_at, Singer.id))
            return [singer.to_document() for singer in result.scalars().all()]

        return await self._guarded(db, "list", action)

    async def get_singer(self, db: AsyncSession, key: uuid.UUID) -> DbResult:
        async def action() -> Optional[Document]:
            singer = await self._find(db, key)
            return singer.to_document() if singer else None

        return await self._guarded(db, "get", action)

    async def create_singer(self, db: AsyncSession, payload: SingerCreate) -> DbResult:
        async def action() -> Document:
            fields = payload.to_document()
            singer = Singer(
                artistname=fields["artistname"],
                band_members=fields.get("band_members"),
            )
            db.add(singer)
            await db.flush()
            await db.commit()
            logger.info("Inserted singer %s (%s)", singer.id, singer.artistname)
            return singer.to_document()

        return await self._guarded(db, "insert", action)


class RelationalSingerService(SingerService):
    """Singers joined at read time to the `instruments` collection."""

    model_name = "relational"

    def _key_filter(self, key: int):
        return Singer.artist_id == key

    def _column_changes(self, changes: Document) -> Document:
        columns = dict(changes)
        if "id" in columns:
            columns["artist_id"] = columns.pop("id")
        return columns

    def _lookup_query(self):
        return (
            select(Singer, Instrument)
            .outerjoin(Instrument, Instrument.artist_id == Singer.artist_id)
            .order_by(Singer.created_at, Singer.id, Instrument.created_at)
        )

    @staticmethod
    def _group(rows) -> List[Document]:
        """Folds (singer, instrument|None) rows into documents with band_members."""
        documents: Dict[uuid.UUID, Document] = {}
        for singer, instrument in rows:
            document = documents.get(singer.id)
            if document is None:
                document = singer.to_document()
                document["band_members"] = []
                documents[singer.id] = document
            if instrument is not None:
                document["band_members"].append(instrument.to_document())
        return list(documents.values())

    async def list_singers(self, db: AsyncSession) -> DbResult:
        async def action() -> List[Document]:
            result = await db.execute(self._lookup_query())
            return self._group(result.all())

        return await self._guarded(db, "list", action)

    async def get_singer(self, db: AsyncSession, key: int) -> DbResult:
        """Returns a list of zero or one documents (aggregation result shape)."""

        async def action() -> List[Document]:
            result = await db.execute(self._lookup_query().where(self._key_filter(key)))
            return self._group(result.all())

        return await self._guarded(db, "get", action)

    async def create_singer(self, db: AsyncSession, payload: RelationalSingerCreate) -> DbResult:
        async def action() -> Document:
            singer = Singer(artist_id=payload.id, artistname=payload.artistname)
            db.add(singer)
            await db.flush()
            await db.commit()
            logger.info("Inserted singer %s (artist id %d)", singer.id, payload.id)
            return singer.to_document()

        return await self._guarded(db, "insert", action)


embedded_singer_service = EmbeddedSingerService()
relational_singer_service = RelationalSingerService()

"""
Singers API — Instrument Service
==================================

What:  Insert and list documents in the `instruments` collection.
Why:   The relational singer model computes band_members from these rows.
"""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import DbResult
from app.models import Instrument
from app.schemas.singer import InstrumentCreate

logger = logging.getLogger(__name__)


class InstrumentService:
    async def create_instrument(self, db: AsyncSession, payload: InstrumentCreate) -> DbResult:
        try:
            instrument = Instrument(
                artist_id=payload.artist_id,
                singer_name=payload.singer_name,
                instruments=list(payload.instruments),
            )
            db.add(instrument)
            await db.flush()
            await db.commit()
        except (SQLAlchemyError, OSError) as e:
            await db.rollback()
            logger.error("Database error inserting instrument: %s", e)
            return DbResult.failure(e)

        logger.info("Inserted instrument %s for artist %d", instrument.id, instrument.artist_id)
        return DbResult(value=instrument.to_document())

    async def list_instruments(
        self, db: AsyncSession, artist_id: Optional[int] = None
    ) -> DbResult:
        query = select(Instrument).order_by(Instrument.created_at, Instrument.id)
        if artist_id is not None:
            query = query.where(Instrument.artist_id == artist_id)
        try:
            result = await db.execute(query)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database error listing instruments: %s", e)
            return DbResult.failure(e)
        return DbResult(value=[instrument.to_document() for instrument in result.scalars().all()])


instrument_service = InstrumentService()

"""
Singers API — Instrument Route Handlers
=========================================

What:  POST /instrument and GET /instruments for the collection joined into
       relational singers as band_members.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import InsertFailedError
from app.routes.common import ERROR_RESPONSES, unwrap, validate_input
from app.schemas.singer import InsertResponse, InsertResult, InstrumentCreate
from app.services.instrument_service import instrument_service

router = APIRouter(tags=["Instruments"], responses=ERROR_RESPONSES)


@router.get("/instruments", summary="List instruments")
async def list_instruments(
    artist_id: Optional[int] = Query(
        default=None, ge=1, le=1000,
        description="Only instruments joined to this artist id",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    """Unlike /singers, an empty result is a normal 200 []."""
    return unwrap(await instrument_service.list_instruments(db, artist_id=artist_id))


@router.post("/instrument", summary="Create an instrument document")
async def create_instrument(
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> InsertResponse:
    instrument = validate_input(InstrumentCreate, payload)

    result = await instrument_service.create_instrument(db, instrument)
    if not result.ok:
        raise InsertFailedError(context={"error": result.error})

    document = result.value
    return InsertResponse(
        result=InsertResult(inserted_id=document["_id"]),
        document=document,
    )

"""
Singers API — Singer Route Handlers (relational model)
========================================================

What:  Same routes as singers.py, but singers are addressed by their integer
       `id` and band members are looked up from the `instruments` collection.

Differences from the embedded model:
    - GET /singer/{id} returns a one-element ARRAY (aggregation result shape)
    - Invalid create/patch bodies answer {"error": "Invalid Input"} without
      field details
    - PATCH / DELETE return the stored singer without computed band_members
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import EmptyResultError, InsertFailedError
from app.routes.common import ERROR_RESPONSES, unwrap, validate_input
from app.schemas.singer import (
    InsertResponse,
    InsertResult,
    RelationalSingerCreate,
    RelationalSingerPatch,
)
from app.services.keys import to_artist_id
from app.services.singer_service import relational_singer_service as singer_service

router = APIRouter(tags=["Singers"], responses=ERROR_RESPONSES)


@router.get("/singers", summary="List all singers with their band members")
async def list_singers(
    db: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    documents = unwrap(await singer_service.list_singers(db))
    if not documents:
        raise EmptyResultError()
    return documents


@router.get("/singer/{singer_id}", summary="Get a singer by artist id")
async def get_singer(
    singer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    artist_id = to_artist_id(singer_id)
    documents = unwrap(await singer_service.get_singer(db, artist_id))
    if not documents:
        raise EmptyResultError(context={"artist_id": artist_id})
    return documents


@router.post("/singer", summary="Create a singer")
async def create_singer(
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> InsertResponse:
    singer = validate_input(RelationalSingerCreate, payload)

    result = await singer_service.create_singer(db, singer)
    if not result.ok:
        # Includes a duplicate artist id (unique constraint)
        raise InsertFailedError(context={"error": result.error})

    document = result.value
    return InsertResponse(
        result=InsertResult(inserted_id=document["_id"]),
        document=document,
    )


@router.patch("/singer/{singer_id}", summary="Merge-patch a singer")
async def update_singer(
    singer_id: str,
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Dict[str, Any]]:
    artist_id = to_artist_id(singer_id)
    patch = validate_input(RelationalSingerPatch, payload)
    return unwrap(await singer_service.update_singer(db, artist_id, patch.changes()))


@router.delete("/singer/{singer_id}", summary="Delete a singer")
async def delete_singer(
    singer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Dict[str, Any]]:
    artist_id = to_artist_id(singer_id)
    return unwrap(await singer_service.delete_singer(db, artist_id))

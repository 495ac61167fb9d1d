"""
Singers API — Singer Route Handlers (embedded model)
======================================================

What:  CRUD on /singers and /singer/{id} where band members are embedded
       sub-documents.
How:   Each handler converts the path id, validates the body where there is
       one, awaits exactly one service call and returns its document.

Route Inventory:
    GET    /singers         all documents (400 when the collection is empty)
    GET    /singer/{id}     one document object
    POST   /singer          validated insert, returns the insert envelope
    PATCH  /singer/{id}     merge-patch, returns the updated document or null
    DELETE /singer/{id}     returns the deleted document or null
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import EmptyResultError, InsertFailedError
from app.routes.common import ERROR_RESPONSES, unwrap, validate_body
from app.schemas.singer import InsertResponse, InsertResult, SingerCreate, SingerPatch
from app.services.keys import to_primary_key
from app.services.singer_service import embedded_singer_service as singer_service

router = APIRouter(tags=["Singers"], responses=ERROR_RESPONSES)


@router.get("/singers", summary="List all singers")
async def list_singers(
    db: AsyncSession = Depends(get_db_session),
) -> List[Dict[str, Any]]:
    documents = unwrap(await singer_service.list_singers(db))
    if not documents:
        raise EmptyResultError()
    return documents


@router.get("/singer/{singer_id}", summary="Get a singer by document id")
async def get_singer(
    singer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Dict[str, Any]:
    key = to_primary_key(singer_id)
    document = unwrap(await singer_service.get_singer(db, key))
    if document is None:
        raise EmptyResultError(context={"singer_id": singer_id})
    return document


@router.post("/singer", summary="Create a singer")
async def create_singer(
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db_session),
) -> InsertResponse:
    """
    Validate and insert a singer document.

    Invalid bodies get the full validation error; a rejected insert is
    forwarded to the InsertFailedError handler.
    """
    singer = validate_body(SingerCreate, payload)

    result = await singer_service.create_singer(db, singer)
    if not result.ok:
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
    key = to_primary_key(singer_id)
    patch = validate_body(SingerPatch, payload)
    return unwrap(await singer_service.update_singer(db, key, patch.changes()))


@router.delete("/singer/{singer_id}", summary="Delete a singer")
async def delete_singer(
    singer_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Dict[str, Any]]:
    key = to_primary_key(singer_id)
    return unwrap(await singer_service.delete_singer(db, key))

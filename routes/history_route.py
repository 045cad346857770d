from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request

from controllers.history_controller import delete_history_record, get_history_record, get_thumbnail, list_history
from models.history_record import HistoryStatus
from models.language import Language

router = APIRouter(prefix="/history")


@router.get("")
async def get_history(
    request: Request,
    lang: Language = Language.EN,
    status: Optional[HistoryStatus] = None,
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """List scan history, newest first, with derived medicine names."""
    try:
        return await list_history(request, lang, status=status, limit=limit, offset=offset)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{record_id}")
async def get_history_item(request: Request, record_id: str, lang: Language = Language.EN):
    try:
        return await get_history_record(request, record_id, lang)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.delete("/{record_id}")
async def delete_history_item(request: Request, record_id: str):
    try:
        return await delete_history_record(request, record_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{record_id}/thumbnail")
async def get_history_thumbnail(request: Request, record_id: str):
    """Return the PNG thumbnail bytes for the specified record."""
    try:
        return await get_thumbnail(request, record_id)
    except HTTPException:
        raise
    except Exception as exc:
        raise HTTPException(status_code=500, detail=str(exc))

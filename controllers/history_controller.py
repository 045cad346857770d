from fastapi import Request, HTTPException
from fastapi.responses import Response
from typing import Any, Dict, List, Optional

from dal.history_dal import HistoryDAL
from models.history_record import HistoryRecord, HistoryStatus
from models.language import Language
from services.analysis.name_extractor import extract_medicine_name
from services.thumbnail_generator import ThumbnailGenerator


def history_dal(request: Request) -> HistoryDAL:
    """Build a HistoryDAL bound to the shared database and change feed."""
    return HistoryDAL(request.app.state.db_initializer, request.app.state.history_feed)


def serialize_record(record: HistoryRecord, lang: Language, include_image: bool = False) -> Dict[str, Any]:
    """Render a record with its derived `medicine_name` and `timestamp`."""
    item: Dict[str, Any] = {
        "id": record.id,
        "created_at": record.created_at,
        "status": record.status.value,
        "file_name": record.file_name,
        "analysis_result": record.analysis_result,
        "medicine_name": extract_medicine_name(record.initial_analysis or "", lang),
        "timestamp": record.timestamp,
        "thumbnail_url": f"/history/{record.id}/thumbnail",
    }
    if include_image:
        item["image_data"] = record.image_data
    return item


async def list_history(
    request: Request,
    lang: Language,
    status: Optional[HistoryStatus] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    """Return history records, newest first."""
    records = await history_dal(request).list_records(status=status, limit=limit, offset=offset)
    return [serialize_record(record, lang) for record in records]


async def get_history_record(request: Request, record_id: str, lang: Language) -> Dict[str, Any]:
    """Return one record including its stored image.

    Raises:
        HTTPException(404) if the record does not exist.
    """
    record = await history_dal(request).get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="History record not found")
    return serialize_record(record, lang, include_image=True)


async def delete_history_record(request: Request, record_id: str) -> Dict[str, Any]:
    """Delete a record.

    Raises:
        HTTPException(404) if the record does not exist.
    """
    deleted = await history_dal(request).delete_record(record_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="History record not found")
    return {"id": record_id, "deleted": True}


async def get_thumbnail(request: Request, record_id: str) -> Response:
    """Controller to render a PNG thumbnail for a stored capture.

    Returns:
        FastAPI `Response` with raw PNG bytes and `media_type` `image/png`.

    Raises:
        HTTPException(404) if the record is missing or its image is unreadable.
    """
    record = await history_dal(request).get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="History record not found")

    try:
        thumbnail = ThumbnailGenerator().create_thumbnail_from_data_url(record.image_data)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail="Thumbnail not available for this record") from exc

    return Response(content=thumbnail, media_type="image/png")

"""FastAPI routes for medicine chat sessions."""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from controllers.session_controller import close_session, get_session, reopen_session, send_message, start_session
from models.language import Language

router = APIRouter(prefix="/sessions")


class StartPayload(BaseModel):
	image_data_url: str
	lang: Language = Language.EN


class ReopenPayload(BaseModel):
	lang: Language = Language.EN


class MessagePayload(BaseModel):
	text: str


@router.post("")
async def start_session_route(request: Request, payload: StartPayload):
	try:
		return await start_session(request, payload.image_data_url, payload.lang)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/history/{record_id}")
async def reopen_session_route(request: Request, record_id: str, payload: ReopenPayload):
	try:
		return await reopen_session(request, record_id, payload.lang)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.get("/{session_id}")
async def get_session_route(request: Request, session_id: str):
	try:
		return await get_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/messages")
async def post_message_route(request: Request, session_id: str, payload: MessagePayload):
	try:
		return await send_message(request, session_id, payload.text)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))


@router.post("/{session_id}/close")
async def close_session_route(request: Request, session_id: str):
	try:
		return await close_session(request, session_id)
	except HTTPException:
		raise
	except Exception as exc:
		raise HTTPException(status_code=500, detail=str(exc))

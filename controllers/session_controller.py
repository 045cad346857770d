"""Session lifecycle helpers for medicine chat."""

from __future__ import annotations

import time
from typing import Any, Dict

from fastapi import HTTPException, Request

from controllers.history_controller import history_dal
from models.history_record import HistoryStatus
from models.language import Language
from services.chat.medicine_chat import MedicineChatService
from services.errors import AnalysisError, SessionStateError
from utils.media_validation import ensure_image_data_url


def _chat_service(request: Request) -> MedicineChatService:
	return MedicineChatService(request.app.state.completion_client, request.app.state.session_store)


async def start_session(request: Request, image_data_url: str, lang: Language) -> Dict[str, Any]:
	"""Store a capture, run the initial analysis and open a chat session.

	The history record is inserted as pending, then marked analyzed with the
	analysis text, or error when the analysis fails.
	"""
	try:
		ensure_image_data_url(image_data_url)
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc

	dal = history_dal(request)
	record = await dal.create_record(image_data_url, file_name=f"medicine_{int(time.time() * 1000)}.jpg")

	try:
		state = await _chat_service(request).start(image_data_url, lang)
	except AnalysisError as exc:
		await dal.update_record(record.id, status=HistoryStatus.ERROR)
		raise HTTPException(status_code=502, detail=str(exc)) from exc
	except Exception:
		await dal.update_record(record.id, status=HistoryStatus.ERROR)
		raise

	state.record_id = record.id
	await dal.update_record(
		record.id,
		status=HistoryStatus.ANALYZED,
		analysis_result={"initial_analysis": state.initial_message},
	)
	return {"session_id": state.session_id, "record_id": record.id, "initial_message": state.initial_message}


async def reopen_session(request: Request, record_id: str, lang: Language) -> Dict[str, Any]:
	"""Resume a stored analysis as a chat session keyed by the record id."""
	record = await history_dal(request).get_record(record_id)
	if record is None:
		raise HTTPException(status_code=404, detail="History record not found")
	try:
		state = _chat_service(request).reopen(record, lang)
	except SessionStateError as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	return {"session_id": state.session_id, "record_id": record.id, "initial_message": state.initial_message}


async def get_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Return the status and messages of an open session."""
	try:
		state = request.app.state.session_store.get(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return state.to_dict()


async def send_message(request: Request, session_id: str, text: str) -> Dict[str, Any]:
	"""Send a follow-up question and return the assistant reply."""
	try:
		reply = await _chat_service(request).send(session_id, text)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	except ValueError as exc:
		raise HTTPException(status_code=400, detail=str(exc)) from exc
	except SessionStateError as exc:
		raise HTTPException(status_code=409, detail=str(exc)) from exc
	return {"session_id": session_id, "message": reply.to_dict()}


async def close_session(request: Request, session_id: str) -> Dict[str, Any]:
	"""Close a session; later messages are rejected."""
	try:
		state = _chat_service(request).close(session_id)
	except KeyError as exc:
		raise HTTPException(status_code=404, detail=str(exc)) from exc
	return {"session_id": session_id, "closed": True, "message_count": len(state.messages)}

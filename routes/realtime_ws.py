"""WebSocket endpoints for streamed analyses and history change events."""

from __future__ import annotations

import asyncio
import json

from fastapi import APIRouter, WebSocket
from starlette.websockets import WebSocketDisconnect

from services.history.change_feed import HistoryChangeFeed
from services.realtime.ws_analysis import AnalysisSocketHandler

router = APIRouter()


@router.websocket("/ws/analysis")
async def analysis_socket(websocket: WebSocket):
	"""Run section analyses and stream every section update to the client."""
	await websocket.accept()
	handler = AnalysisSocketHandler(websocket.app.state.completion_client)
	while True:
		try:
			raw = await websocket.receive_text()
		except WebSocketDisconnect:
			return
		try:
			payload = json.loads(raw)
		except ValueError:
			await websocket.send_text(json.dumps({"type": "error", "detail": "Payload must be JSON"}))
			continue
		if not isinstance(payload, dict):
			await websocket.send_text(json.dumps({"type": "error", "detail": "Payload must be a JSON object"}))
			continue
		await handler.handle(websocket, payload)


@router.websocket("/ws/history")
async def history_socket(websocket: WebSocket):
	"""Push a change event whenever a history record is inserted, updated or deleted."""
	await websocket.accept()
	feed: HistoryChangeFeed = websocket.app.state.history_feed
	async with feed.subscribe() as queue:

		async def _forward() -> None:
			while True:
				change = await queue.get()
				await websocket.send_text(json.dumps(change.to_dict()))

		await websocket.send_text(json.dumps({"type": "history.subscribed"}))
		forwarder = asyncio.create_task(_forward())
		try:
			# Inbound frames are ignored; receiving only detects the disconnect.
			while True:
				await websocket.receive_text()
		except WebSocketDisconnect:
			pass
		finally:
			forwarder.cancel()
			# Collect the forwarder's outcome, including a send to a closed socket.
			await asyncio.gather(forwarder, return_exceptions=True)

"""Dispatch analysis websocket events and stream section progress."""
from __future__ import annotations

import json
from typing import Any, Dict

from fastapi import WebSocket

from models.language import Language
from services.analysis.section_orchestrator import SectionOrchestrator, SectionSnapshot
from services.completion.flowise_client import FlowiseClient


class AnalysisSocketHandler:
	"""Run analyses requested over one websocket and push every section update."""

	def __init__(self, client: FlowiseClient) -> None:
		self.orchestrator = SectionOrchestrator(client)

	async def handle(self, websocket: WebSocket, payload: Dict[str, Any]) -> None:
		"""Process a single inbound websocket payload."""
		request_id = payload.get("request_id")
		message_type = payload.get("type")
		try:
			if message_type == "analysis.start":
				result = await self._analyze(websocket, request_id, payload)
			else:
				raise ValueError("Unsupported message type.")
			result["request_id"] = request_id
			await self._send(websocket, result)
		except Exception as exc:
			await self._send_error(websocket, request_id, str(exc))

	async def _analyze(self, websocket: WebSocket, request_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
		image_data_url = (payload.get("image_data_url") or "").strip()
		if not image_data_url:
			raise ValueError("Image payload is required.")
		lang = Language.parse(payload.get("lang"))

		async def _on_update(sections: SectionSnapshot) -> None:
			await self._send(
				websocket,
				{
					"type": "analysis.sections",
					"request_id": request_id,
					"sections": [section.to_dict() for section in sections.values()],
				},
			)

		report = await self.orchestrator.analyze(image_data_url, lang, on_update=_on_update)
		return {"type": "analysis.report", **report.to_dict()}

	async def _send_error(self, websocket: WebSocket, request_id: Any, detail: str) -> None:
		await self._send(websocket, {"type": "error", "request_id": request_id, "detail": detail})

	async def _send(self, websocket: WebSocket, payload: Dict[str, Any]) -> None:
		await websocket.send_text(json.dumps(payload, ensure_ascii=False))

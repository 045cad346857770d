"""Conversational sessions anchored to a single medicine analysis."""

from __future__ import annotations

import logging
from typing import Optional

from models.history_record import HistoryRecord
from models.language import Language
from models.session_models import ChatMessage, ChatSession, MessageRole, SessionStatus
from services.analysis.prompts import ANALYSIS_FAILED, CHAT_ERROR, INITIAL_ANALYSIS_PROMPTS, follow_up_prompt
from services.chat.session_store import SessionStore
from services.completion.flowise_client import FlowiseClient
from services.errors import AnalysisError, SessionStateError
from utils.media_validation import ensure_image_data_url

LOGGER = logging.getLogger(__name__)


class MedicineChatService:
	"""Start, continue and close medicine chat sessions.

	A session moves uninitialized -> initiating -> active -> closed. The
	session id is the only correlator sent with each message so the
	completion backend can keep its own conversational memory.
	"""

	def __init__(self, client: FlowiseClient, store: SessionStore) -> None:
		if client is None:
			raise ValueError("Completion client is required.")
		self.client = client
		self.store = store

	async def start(self, image_data_url: str, language: Language) -> ChatSession:
		"""Analyze a captured image and open a session around the result.

		Raises:
			AnalysisError: With the localized analysis-failed message when the
				image is unreadable or the initial call fails. No session is
				left behind in that case.
		"""
		try:
			ensure_image_data_url(image_data_url)
		except ValueError as exc:
			LOGGER.warning("Rejected capture before analysis: %s", exc)
			raise AnalysisError(ANALYSIS_FAILED[language]) from exc

		state = self.store.create(language)
		try:
			initial = await self.client.request(INITIAL_ANALYSIS_PROMPTS[language], image_data_url, state.session_id)
		except Exception as exc:
			LOGGER.error("Initial analysis failed for session %s: %s", state.session_id, exc)
			self.store.close(state.session_id)
			raise AnalysisError(ANALYSIS_FAILED[language]) from exc

		LOGGER.info("Session %s started", state.session_id)
		return self.store.activate(state.session_id, initial)

	def reopen(self, record: HistoryRecord, language: Language) -> ChatSession:
		"""Resume a stored analysis as an active session without any network call.

		The record id becomes the session id.
		"""
		initial = record.initial_analysis
		if not initial:
			raise SessionStateError(f"History record {record.id} has no analysis to chat about")
		return self.store.open(record.id, language, initial, record_id=record.id)

	async def send(self, session_id: str, text: str) -> ChatMessage:
		"""Send a follow-up question and return the assistant's reply.

		The first question of a session is wrapped together with the initial
		analysis; later questions go out verbatim. A failed call becomes a
		localized assistant error reply and the session stays active.

		Raises:
			KeyError: If the session does not exist.
			ValueError: If the question is empty.
			SessionStateError: If the session is not active, or was closed
				while the reply was pending (the reply is discarded).
		"""
		state = self.store.get(session_id)
		if state.status is not SessionStatus.ACTIVE:
			raise SessionStateError(f"Session {session_id} is {state.status.value}")
		question = (text or "").strip()
		if not question:
			raise ValueError("Message text is required.")

		first_question = state.user_turns == 0
		self.store.add_message(session_id, MessageRole.USER, question)
		outgoing = follow_up_prompt(state.language, state.initial_message, question) if first_question else question

		try:
			reply: Optional[str] = await self.client.request(outgoing, session_id=state.session_id)
		except Exception as exc:
			LOGGER.warning("Chat turn failed for session %s: %s", session_id, exc)
			reply = CHAT_ERROR[state.language]

		if state.status is not SessionStatus.ACTIVE:
			LOGGER.info("Discarding reply for closed session %s", session_id)
			raise SessionStateError(f"Session {session_id} was closed")
		return self.store.add_message(session_id, MessageRole.ASSISTANT, reply or "")

	def close(self, session_id: str) -> ChatSession:
		"""Close an open session; later sends are rejected."""
		state = self.store.close(session_id)
		LOGGER.info("Session %s closed", session_id)
		return state

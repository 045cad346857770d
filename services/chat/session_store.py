"""Simple in-memory store for medicine chat sessions."""

from __future__ import annotations

from typing import Dict
from uuid import uuid4

from models.language import Language
from models.session_models import ChatMessage, ChatSession, MessageRole, SessionStatus


class SessionStore:
	"""Own the open chat sessions, keyed by their opaque session id."""

	def __init__(self) -> None:
		self._sessions: Dict[str, ChatSession] = {}

	def __len__(self) -> int:
		return len(self._sessions)

	def _new_session_id(self) -> str:
		session_id = uuid4().hex
		while session_id in self._sessions:
			session_id = uuid4().hex
		return session_id

	def create(self, language: Language) -> ChatSession:
		"""Register a new session in the initiating state with a fresh id."""
		state = ChatSession(session_id=self._new_session_id(), language=language, status=SessionStatus.INITIATING)
		self._sessions[state.session_id] = state
		return state

	def activate(self, session_id: str, initial_message: str) -> ChatSession:
		"""Move an initiating session to active with its first assistant message."""
		state = self.get(session_id)
		if state.status is not SessionStatus.INITIATING:
			raise ValueError(f"Session {session_id} is {state.status.value}, expected initiating")
		state.initial_message = initial_message
		state.messages.append(ChatMessage(role=MessageRole.ASSISTANT, content=initial_message))
		state.status = SessionStatus.ACTIVE
		return state

	def open(self, session_id: str, language: Language, initial_message: str, record_id: str | None = None) -> ChatSession:
		"""Register an already-analyzed conversation directly as active.

		Any session previously held under the same id is closed and replaced.
		"""
		previous = self._sessions.pop(session_id, None)
		if previous is not None:
			previous.status = SessionStatus.CLOSED
		state = ChatSession(
			session_id=session_id,
			language=language,
			initial_message=initial_message,
			status=SessionStatus.ACTIVE,
			messages=[ChatMessage(role=MessageRole.ASSISTANT, content=initial_message)],
			record_id=record_id,
		)
		self._sessions[session_id] = state
		return state

	def get(self, session_id: str) -> ChatSession:
		"""Return a session or raise KeyError if missing."""
		state = self._sessions.get(session_id)
		if state is None:
			raise KeyError(f"Session {session_id} not found")
		return state

	def add_message(self, session_id: str, role: MessageRole, content: str) -> ChatMessage:
		"""Append a message to the session conversation."""
		state = self.get(session_id)
		message = ChatMessage(role=role, content=content)
		state.messages.append(message)
		return message

	def close(self, session_id: str) -> ChatSession:
		"""Mark a session closed and drop it from the store."""
		state = self.get(session_id)
		state.status = SessionStatus.CLOSED
		del self._sessions[session_id]
		return state

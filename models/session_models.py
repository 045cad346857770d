"""Chat session domain models for medicine conversations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import uuid4

from models.language import Language


class MessageRole(str, Enum):
	USER = "user"
	ASSISTANT = "assistant"


class SessionStatus(str, Enum):
	UNINITIALIZED = "uninitialized"
	INITIATING = "initiating"
	ACTIVE = "active"
	CLOSED = "closed"


@dataclass
class ChatMessage:
	"""A single turn in a medicine conversation."""

	role: MessageRole
	content: str
	id: str = field(default_factory=lambda: uuid4().hex)
	timestamp: float = field(default_factory=lambda: time.time())

	def to_dict(self) -> Dict[str, Any]:
		return {"id": self.id, "role": self.role.value, "content": self.content, "timestamp": self.timestamp}


@dataclass
class ChatSession:
	"""Conversation anchored to one initial medicine analysis.

	`session_id` is opaque and only meaningful to the completion backend, which
	scopes its conversational memory by it. It is never reassigned.
	"""

	session_id: str
	language: Language
	initial_message: str = ""
	status: SessionStatus = SessionStatus.UNINITIALIZED
	messages: List[ChatMessage] = field(default_factory=list)
	record_id: Optional[str] = None

	@property
	def user_turns(self) -> int:
		return sum(1 for msg in self.messages if msg.role is MessageRole.USER)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"session_id": self.session_id,
			"lang": self.language.value,
			"status": self.status.value,
			"record_id": self.record_id,
			"messages": [msg.to_dict() for msg in self.messages],
		}

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class HistoryStatus(str, Enum):
    PENDING = "pending"
    ANALYZED = "analyzed"
    ERROR = "error"


@dataclass
class HistoryRecord:
    """In-memory representation of a row in the medicine_images table.

    Attributes:
        id: Primary key (uuid hex string).
        created_at: ISO-8601 UTC timestamp set when the row was inserted.
        status: pending until the initial analysis settles, then analyzed or error.
        image_data: Captured image as a data URL.
        file_name: Name recorded for the capture.
        analysis_result: Optional mapping holding ``initial_analysis`` text.
    """

    id: str
    created_at: str
    status: HistoryStatus
    image_data: str
    file_name: Optional[str] = None
    analysis_result: Optional[Dict[str, Any]] = None

    @property
    def initial_analysis(self) -> Optional[str]:
        if not self.analysis_result:
            return None
        return self.analysis_result.get("initial_analysis") or None

    @property
    def timestamp(self) -> float:
        """Milliseconds since the epoch for `created_at`."""
        return datetime.fromisoformat(self.created_at).timestamp() * 1000


@dataclass(frozen=True)
class HistoryChange:
    """Change notification emitted after a history mutation."""

    event: str
    record_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"type": "history.change", "event": self.event, "record_id": self.record_id}

"""Environment-backed configuration for the completion endpoint."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)

DEFAULT_FLOWISE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT_SECONDS = 120.0


@dataclass(frozen=True)
class CompletionSettings:
    """Connection details for the Flowise prediction endpoint.

    Attributes:
        base_url: Flowise server root, without a trailing slash.
        flow_id: Chatflow identifier appended to the prediction path.
        timeout: Per-request timeout in seconds.
    """

    base_url: str = DEFAULT_FLOWISE_URL
    flow_id: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @property
    def prediction_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/api/v1/prediction/{self.flow_id or ''}"

    @classmethod
    def from_env(cls) -> "CompletionSettings":
        """Read FLOWISE_API_URL, FLOWISE_CHATFLOW_ID and FLOWISE_TIMEOUT_SECONDS.

        A missing chatflow id only logs a warning; requests made without it
        fail at the transport layer.
        """
        base_url = (os.getenv("FLOWISE_API_URL") or DEFAULT_FLOWISE_URL).strip()
        flow_id = (os.getenv("FLOWISE_CHATFLOW_ID") or "").strip() or None
        if flow_id is None:
            LOGGER.warning("FLOWISE_CHATFLOW_ID is not configured in environment variables")

        raw_timeout = os.getenv("FLOWISE_TIMEOUT_SECONDS")
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT_SECONDS
        except ValueError as exc:
            raise RuntimeError(f"FLOWISE_TIMEOUT_SECONDS={raw_timeout!r} is not a number") from exc

        return cls(base_url=base_url, flow_id=flow_id, timeout=timeout)

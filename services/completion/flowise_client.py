"""Thin async client for the Flowise prediction endpoint."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

import httpx

from services.errors import RemoteServiceError
from utils.settings import CompletionSettings

LOGGER = logging.getLogger(__name__)

UPLOAD_NAME = "medicine.jpg"
UPLOAD_MIME = "image/jpeg"


def build_payload(
    question: str, image_data_url: Optional[str] = None, session_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build the prediction request body.

    `sessionId` is left out entirely when no session is given, so the flow
    treats the call as stateless.
    """
    override_config: Dict[str, Any] = {"streamResponse": False}
    payload: Dict[str, Any] = {"question": question, "overrideConfig": override_config}
    if session_id:
        payload["sessionId"] = session_id
        override_config["sessionId"] = session_id
    if image_data_url:
        payload["uploads"] = [
            {"data": image_data_url, "type": "file", "name": UPLOAD_NAME, "mime": UPLOAD_MIME}
        ]
    return payload


class FlowiseClient:
    """Issue single request/response calls against a Flowise chatflow.

    The client keeps no state between calls and never retries; callers own
    retry policy.
    """

    def __init__(self, settings: CompletionSettings, http_client: Optional[httpx.AsyncClient] = None) -> None:
        """
        Args:
            settings: Endpoint location and timeout.
            http_client: Optional shared AsyncClient. When omitted the client
                creates (and later closes) its own.
        """
        self.settings = settings
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.timeout)

    async def request(
        self,
        prompt_text: str,
        image_data_url: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> str:
        """Send one prompt, optionally with an image and session id.

        Returns:
            The response `text` with surrounding whitespace stripped, or an
            empty string when the response carries no text.

        Raises:
            ValueError: If `prompt_text` is empty.
            RemoteServiceError: If the call fails or returns a non-2xx status.
        """
        if not prompt_text or not prompt_text.strip():
            raise ValueError("Prompt text is required.")

        payload = build_payload(prompt_text, image_data_url, session_id)
        LOGGER.debug(
            "Flowise request session=%s has_image=%s prompt_chars=%d",
            session_id,
            bool(image_data_url),
            len(prompt_text),
        )

        start = time.time()
        try:
            response = await self._http.post(self.settings.prediction_url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            LOGGER.error("Flowise transport error: %s", exc)
            raise RemoteServiceError(f"Failed to reach Flowise: {exc}") from exc

        if not response.is_success:
            LOGGER.error("Flowise API error: %s %s", response.status_code, response.reason_phrase)
            raise RemoteServiceError(
                f"Failed to get response from Flowise (status {response.status_code})",
                status_code=response.status_code,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise RemoteServiceError("Flowise returned a non-JSON response") from exc

        text = result.get("text") if isinstance(result, dict) else None
        LOGGER.info("Flowise response received in %.3fs (session=%s)", time.time() - start, session_id)
        return text.strip() if isinstance(text, str) else ""

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

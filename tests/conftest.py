"""Shared pytest fixtures for the analysis, chat and API tests."""

import asyncio
import base64
import io
from typing import Callable, Dict, List, Optional

import pytest
from PIL import Image

from services.errors import RemoteServiceError
from utils.settings import CompletionSettings


def make_data_url(fmt: str = "PNG", mime: str = "image/png") -> str:
    buf = io.BytesIO()
    Image.new("RGB", (32, 24), (200, 30, 30)).save(buf, format=fmt)
    return f"data:{mime};base64,{base64.b64encode(buf.getvalue()).decode('ascii')}"


class FakeCompletionClient:
    """Stand-in for FlowiseClient that records calls and replies from a script.

    `responder(prompt, image_data_url, session_id)` returns the reply text or
    raises. `delays` maps a prompt to seconds to wait before replying.
    """

    def __init__(self, responder: Optional[Callable] = None, delays: Optional[Dict[str, float]] = None) -> None:
        self.settings = CompletionSettings(base_url="http://flowise.test", flow_id="flow-123")
        self.responder = responder or (lambda prompt, image, session: "ok")
        self.delays = delays or {}
        self.calls: List[dict] = []

    async def request(self, prompt_text, image_data_url=None, session_id=None):
        self.calls.append({"prompt": prompt_text, "image": image_data_url, "session_id": session_id})
        delay = self.delays.get(prompt_text)
        if delay:
            await asyncio.sleep(delay)
        return self.responder(prompt_text, image_data_url, session_id)


def failing(message: str = "Failed to get response from Flowise (status 500)"):
    def _raise(*_args):
        raise RemoteServiceError(message, status_code=500)

    return _raise


@pytest.fixture
def image_data_url():
    return make_data_url()


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def api(monkeypatch, tmp_path, fake_client):
    """TestClient with a temporary history database and a fake completion client."""
    from fastapi.testclient import TestClient

    monkeypatch.setenv("DATABASE_DIR", str(tmp_path / "db"))
    monkeypatch.setenv("FLOWISE_CHATFLOW_ID", "flow-123")

    from main import app

    with TestClient(app) as client:
        app.state.completion_client = fake_client
        yield client

import logging
import os
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from routes.analysis_route import router as analysis_router
from routes.history_route import router as history_router
from routes.realtime_ws import router as realtime_router
from routes.session_route import router as session_router
from services.chat.session_store import SessionStore
from services.completion.flowise_client import FlowiseClient
from services.history.change_feed import HistoryChangeFeed
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import CompletionSettings

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite history database (at DATABASE_DIR/app.db)
      - the Flowise completion client and its shared HTTP connection pool
      - the in-memory chat session store and history change feed
    and attach them to `app.state`.
    """
    db_initializer = AsyncDatabaseInitializer()
    await db_initializer.ensure_database()
    app.state.db_initializer = db_initializer

    settings = CompletionSettings.from_env()
    http_client = httpx.AsyncClient(timeout=settings.timeout)
    app.state.completion_client = FlowiseClient(settings, http_client=http_client)
    app.state.session_store = SessionStore()
    app.state.history_feed = HistoryChangeFeed()
    LOGGER.info("Completion endpoint: %s", settings.prediction_url)

    try:
        yield
    finally:
        await http_client.aclose()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="Mero Aushadhi API", lifespan=lifespan)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies the database, completion client and session store are wired.
        """
        state = request.app.state
        has_db = hasattr(state, "db_initializer")
        client = getattr(state, "completion_client", None)
        settings = getattr(client, "settings", None)
        store = getattr(state, "session_store", None)
        return {
            "ok": True,
            "db_initialized": has_db,
            "completion_configured": bool(settings and settings.flow_id),
            "open_sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(analysis_router)
    app.include_router(session_router)
    app.include_router(history_router)
    app.include_router(realtime_router)

    return app


app = create_app()

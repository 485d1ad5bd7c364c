"""FastAPI application — scoring service, history and stand-alone analyzers.

This module wires together:
- CORS + API key auth middleware
- Request logging and the global error handler
- Assessment scoring and stored history
- Sentiment, typing-metric and questionnaire endpoints
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from neuroaura import __version__
from neuroaura.api.middleware import setup_middleware
from neuroaura.api.routes.analysis import router as analysis_router
from neuroaura.api.routes.assessments import router as assessments_router
from neuroaura.config import get_settings
from neuroaura.logger import setup_logging
from neuroaura.storage.database import dispose_engine, init_db

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle hooks."""
    settings = get_settings()
    setup_logging(settings.log_level)

    await init_db()
    logger.info("server.db_ready")
    logger.info("server.started", port=settings.api_port, persist=settings.persist_results)

    yield  # ← application runs

    await dispose_engine()
    logger.info("server.stopped")


app = FastAPI(
    title="NeuroAura API",
    description="Deterministic stress scoring from questionnaire answers and typing behaviour.",
    version=__version__,
    lifespan=lifespan,
)

# ── Middleware ────────────────────────────────────────────────
setup_middleware(app)

# ── Routers ───────────────────────────────────────────────────
app.include_router(assessments_router)
app.include_router(analysis_router)


# ── Health ────────────────────────────────────────────────────

@app.get("/health", tags=["system"])
async def health():
    return {"status": "ok", "version": __version__}

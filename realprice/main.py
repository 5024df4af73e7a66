# realprice/main.py
from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.engine import Engine

from realprice import __version__
from realprice.api.transactions import router as transactions_router
from realprice.core.settings import Settings, settings as default_settings
from realprice.db.db_connection import ensure_schema, make_engine, make_session_factory

LOGGER = logging.getLogger(__name__)

# local dev origins when API_ALLOWED_ORIGINS is not set
_DEFAULT_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
]


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    settings = settings or default_settings
    engine = engine or make_engine(settings.DATABASE_URL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        ensure_schema(engine)
        yield
        engine.dispose()

    app = FastAPI(title="Taiwan Actual Price Registration API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    # ───── CORS ─────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=(settings.allowed_origins or _DEFAULT_ORIGINS),
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials=False,
    )

    # ───── Health ─────
    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/")
    def index():
        return {
            "name": "Taiwan Actual Price Registration API",
            "version": __version__,
            "endpoints": {
                "GET /api/transactions": "query transactions",
                "GET /api/statistics": "summary statistics",
                "GET /api/trend": "monthly unit price trend",
                "GET /api/districts": "per-district analysis",
                "GET /api/heatmap": "per-district heat values",
                "POST /api/crawl": "trigger a season crawl",
            },
        }

    # ───── Routers ─────
    app.include_router(transactions_router)

    @app.middleware("http")
    async def log_timing(request, call_next):
        t0 = time.perf_counter()
        resp = await call_next(request)
        dt = (time.perf_counter() - t0) * 1000
        LOGGER.info("[%s] %s -> %s %.1fms", request.method, request.url.path, resp.status_code, dt)
        return resp

    return app

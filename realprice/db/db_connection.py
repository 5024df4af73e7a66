# realprice/db/db_connection.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from realprice.core.errors import RealPriceStoreError
from realprice.db.orm_registry import Base, import_all_models

LOGGER = logging.getLogger(__name__)


def make_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Build the engine explicitly; callers own it (no module-level engine).
    - sqlite file: the parent directory is created on demand
    - sqlite memory: single shared connection so every session sees the same DB
    """
    url = make_url(database_url)
    kwargs = {"echo": echo, "future": True}

    if url.get_backend_name() == "sqlite":
        kwargs["connect_args"] = {"check_same_thread": False}
        db_path = url.database
        if not db_path or db_path == ":memory:":
            kwargs["poolclass"] = StaticPool
        else:
            Path(db_path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
    else:
        kwargs["pool_pre_ping"] = True

    engine = create_engine(database_url, **kwargs)

    if url.get_backend_name() == "postgresql":
        # pin search_path on every new connection
        @event.listens_for(engine, "connect")
        def _set_search_path(dbapi_conn, conn_record):
            with dbapi_conn.cursor() as cur:
                cur.execute("SET search_path TO public")

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


def ensure_schema(engine: Engine) -> None:
    """Create missing tables/indices. Idempotent; never alters existing tables."""
    import_all_models()
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
    except SQLAlchemyError as exc:
        raise RealPriceStoreError(f"schema initialization failed: {exc}") from exc
    LOGGER.info("database schema ready (%s)", engine.url.render_as_string(hide_password=True))


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency: one session per request from the app-owned factory."""
    factory: Optional[sessionmaker] = getattr(request.app.state, "session_factory", None)
    if factory is None:
        raise RuntimeError("session factory not initialized (create_app() not used?)")
    db = factory()
    try:
        yield db
    finally:
        db.close()

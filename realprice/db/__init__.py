# realprice/db/__init__.py
from .db_connection import ensure_schema, get_db, make_engine, make_session_factory
from .orm_registry import Base

__all__ = ["Base", "ensure_schema", "get_db", "make_engine", "make_session_factory"]

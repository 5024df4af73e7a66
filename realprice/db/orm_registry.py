# realprice/db/orm_registry.py
from __future__ import annotations

import importlib

from sqlalchemy.orm import declarative_base

Base = declarative_base()

# modules whose tables live on Base.metadata
MODEL_MODULES = ("realprice.models.transaction",)


def import_all_models() -> None:
    """Register every model table before create_all (lazy: models import Base)."""
    for mod in MODEL_MODULES:
        importlib.import_module(mod)


__all__ = ["Base", "MODEL_MODULES", "import_all_models"]

# realprice/services/loader.py
"""
Batch insert of TransactionRecords with insert-or-skip on the natural key.
- one transaction per batch: all eligible rows commit together or none do
- collisions are skipped (ON CONFLICT DO NOTHING), never updated
"""
from __future__ import annotations

import logging
from typing import Callable, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from realprice.core.errors import RealPriceStoreError
from realprice.models.transaction import NATURAL_KEY, Transaction
from realprice.schemas.transaction import TransactionRecord

LOGGER = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _dialect_insert(session: Session) -> Callable:
    name = session.get_bind().dialect.name
    try:
        return _DIALECT_INSERTS[name]
    except KeyError:
        raise RealPriceStoreError(f"insert-or-skip not supported for dialect '{name}'") from None


def _insert_or_skip(session: Session, insert: Callable, record: TransactionRecord) -> int:
    stmt = (
        insert(Transaction)
        .values(**record.model_dump())
        .on_conflict_do_nothing(index_elements=list(NATURAL_KEY))
    )
    result = session.execute(stmt)
    return max(result.rowcount or 0, 0)


def insert_transactions_batch(session_factory: sessionmaker, records: Sequence[TransactionRecord]) -> int:
    """Return the number of rows newly inserted (duplicates count as 0)."""
    if not records:
        return 0

    inserted = 0
    session = session_factory()
    try:
        insert = _dialect_insert(session)
        with session.begin():
            for record in records:
                inserted += _insert_or_skip(session, insert, record)
    except SQLAlchemyError as exc:
        raise RealPriceStoreError(f"batch insert failed, rolled back ({len(records)} rows): {exc}") from exc
    finally:
        session.close()

    LOGGER.debug("batch insert: %s new / %s skipped", inserted, len(records) - inserted)
    return inserted


__all__ = ["insert_transactions_batch"]

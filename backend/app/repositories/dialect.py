"""Dialect-specific INSERT constructs that support ON CONFLICT upserts."""
from __future__ import annotations

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.core.errors import UnsupportedDialectError

_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def upsert_insert(db: Session, model):
    """INSERT for `model` with on_conflict_do_update/do_nothing available."""
    dialect = db.get_bind().dialect.name
    insert = _INSERTS.get(dialect)
    if insert is None:
        raise UnsupportedDialectError(dialect)
    return insert(model)


def as_float_list(vector) -> list[float]:
    """pgvector returns numpy arrays, JSON returns lists; normalize both."""
    return [float(x) for x in vector]

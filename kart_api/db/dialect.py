"""Dialect-aware INSERT builders for ON CONFLICT statements."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

_INSERT_BUILDERS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def conflict_insert(db: Session, model: Any):
    """Return an INSERT for ``model`` that supports ``on_conflict_do_*`` on the bound dialect."""
    dialect_name: str = db.get_bind().dialect.name
    builder = _INSERT_BUILDERS.get(dialect_name)
    if builder is None:
        raise RuntimeError(f"ON CONFLICT inserts are not supported for dialect {dialect_name!r}")
    return builder(model)

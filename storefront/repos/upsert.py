# storefront/repos/upsert.py
from typing import Any, Dict, List

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.orm import InstrumentedAttribute

from storefront.domain.errors import PersistenceError


def upsert_stmt(model, dialect: str, values: Dict[str, Any], keys: List[str], update: Dict[str, Any]):
    """
    Single INSERT .. ON CONFLICT / ON DUPLICATE KEY statement.

    `update` maps column name -> callable(existing_column, incoming_column)
    returning the SQL expression for the new value, so the caller can say
    "existing + incoming" without knowing which dialect it runs on.
    """
    if dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(model).values(**values)
        incoming = stmt.inserted
        return stmt.on_duplicate_key_update(
            **{col: fn(_column(model, col), incoming[col]) for col, fn in update.items()}
        )

    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(**values)
    else:
        raise PersistenceError(f"No native upsert for dialect {dialect!r}")

    incoming = stmt.excluded
    return stmt.on_conflict_do_update(
        index_elements=keys,
        set_={col: fn(_column(model, col), incoming[col]) for col, fn in update.items()},
    )


def _column(model, name: str) -> InstrumentedAttribute:
    return getattr(model, name)

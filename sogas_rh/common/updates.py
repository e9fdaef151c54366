# sogas_rh/common/updates.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy import update
from sqlalchemy.sql.dml import Update


def changed_fields(model, changes: Mapping[str, Any]) -> list[str]:
    """Column names of `model` present in `changes`, in table declaration order."""
    return [c.key for c in model.__table__.columns if c.key in changes]


def compile_update(model, key_column: str, key_value, changes: Mapping[str, Any]) -> Optional[Update]:
    """
    Typed partial update: {field: new value} -> parameterised UPDATE.

    Only mapped columns are kept, ordered as declared on the table so the
    statement is identical for identical input. Returns None when no field
    of `changes` belongs to `model`.
    """
    fields = changed_fields(model, changes)
    if not fields:
        return None
    key = getattr(model, key_column)
    return (
        update(model)
        .where(key == key_value)
        .values({f: changes[f] for f in fields})
        .execution_options(synchronize_session="evaluate")
    )

# sogas_rh/common/uow.py
from __future__ import annotations

import logging
from contextlib import contextmanager

from sogas_rh.extensions import db

log = logging.getLogger(__name__)


@contextmanager
def unit_of_work():
    """
    One request-write = one transaction.

    Commits when the block exits cleanly; on any exception the session is
    rolled back before the error propagates, so no partial multi-table write
    survives. The scoped session itself is released by Flask-SQLAlchemy at
    app-context teardown.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        log.debug("transaction rolled back", exc_info=True)
        raise

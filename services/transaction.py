from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def atomic(session: Session, action: str = "write") -> Iterator[Session]:
    """All-or-nothing unit of work.

    Commits when the block finishes, rolls back on any exception. Store
    failures are logged with context and re-raised as StoreError so callers
    only ever see the opaque message.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("store failure during %s", action)
        raise StoreError(f"Error during {action}") from exc
    except Exception:
        session.rollback()
        raise

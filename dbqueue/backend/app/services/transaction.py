# dbqueue/backend/app/services/transaction.py
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StoreError

logger = logging.getLogger(__name__)


@contextmanager
def store_transaction(db: Session, action: str) -> Iterator[Session]:
    """
    Run the block as one transaction: commit on success, roll back on
    any error. Driver errors come out as StoreError (no retry).
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while %s: %s", action, exc)
        raise StoreError(f"Database error while {action}.") from exc
    except Exception:
        db.rollback()
        raise

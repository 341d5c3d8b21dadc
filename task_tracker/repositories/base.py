"""
Repository Base - Session handling shared by the SQLAlchemy stores
"""

from contextlib import contextmanager
from typing import Iterator
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from task_tracker.core.exceptions import AppError, InternalError

logger = logging.getLogger(__name__)


class SQLAlchemyRepository:
    """Wraps a request-scoped Session; mutations only flush, transaction() commits."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run a read-check-write sequence as one unit.

        Commits when the block finishes, rolls back when it raises. Row locks
        taken inside the block (SELECT ... FOR UPDATE) are held until then.
        """
        try:
            yield
            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Store transaction failed: {str(e)}", exc_info=True)
            raise InternalError("Database operation failed") from e
        except Exception:
            self.db.rollback()
            raise

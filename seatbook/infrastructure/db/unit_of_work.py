# seatbook/infrastructure/db/unit_of_work.py

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from seatbook.domain.exceptions import DataAccessError

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    One transaction on a session with a single commit/rollback decision.

    Leaving the block without commit() rolls back, unless keep_open is set,
    in which case the transaction stays open for the next unit of work on the
    same session to join. Any SQLAlchemy error rolls back and is re-raised
    as DataAccessError.
    """

    def __init__(
        self,
        db: Session,
        operation: str,
        isolation_level: str | None = None,
        keep_open: bool = False,
    ):
        self.db = db
        self.operation = operation
        self.isolation_level = isolation_level
        self.keep_open = keep_open
        self.joined = False
        self._finished = False

    def __enter__(self) -> "UnitOfWork":
        self.joined = self.db.in_transaction()
        try:
            if self.isolation_level and not self.joined:
                # Must be the first statement of the transaction.
                self.db.connection(
                    execution_options={"isolation_level": self.isolation_level}
                )
        except SQLAlchemyError as exc:
            self._safe_rollback()
            raise DataAccessError(self.operation, exc) from exc
        return self

    def commit(self) -> None:
        self.db.commit()
        self._finished = True

    def rollback(self) -> None:
        self.db.rollback()
        self._finished = True

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            if not self._finished and not self.keep_open:
                try:
                    self.rollback()
                except SQLAlchemyError as rollback_exc:
                    raise DataAccessError(self.operation, rollback_exc) from rollback_exc
            return False

        self._safe_rollback()

        if isinstance(exc, SQLAlchemyError):
            logger.error("%s failed, transaction rolled back: %s", self.operation, exc)
            raise DataAccessError(self.operation, exc) from exc

        return False

    def _safe_rollback(self) -> None:
        try:
            self.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed during %s", self.operation)

import logging
import os
import time
from typing import Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from seatbook.infrastructure.db.models import Base
from seatbook.infrastructure.db.unit_of_work import UnitOfWork
from seatbook.infrastructure.repositories.booking_repository import BookingRepository
from seatbook.infrastructure.repositories.category_repository import CategoryRepository
from seatbook.infrastructure.repositories.seat_repository import SeatRepository

logger = logging.getLogger(__name__)


def _ping(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def wait_for_db(
    engine: Engine,
    attempts: int | None = None,
    delay: float | None = None,
) -> None:
    """
    Blocks until `engine` answers a trivial query.
    Raises the last OperationalError once `attempts` are used up.
    """
    if attempts is None:
        attempts = int(os.getenv("DB_CONNECT_MAX_RETRIES", "30"))
    if delay is None:
        delay = float(os.getenv("DB_CONNECT_RETRY_DELAY", "1.5"))

    attempt = 1
    while True:
        try:
            _ping(engine)
            break
        except OperationalError as exc:
            if attempt >= attempts:
                logger.error("Gave up on %s after %s attempts: %s", engine.url, attempt, exc)
                raise
            logger.warning("Store not ready, attempt %s of %s; sleeping %.1fs", attempt, attempts, delay)
            attempt += 1
            time.sleep(delay)

    logger.info("Store at %s is reachable", engine.url)


def init_data_store(
    db: Session,
    seat_count: int,
    price_list: Sequence[float],
) -> bool:
    """
    Resets the venue: seats 1..seat_count all available, one category per
    price (category i costs price_list[i]) and no bookings.

    Tables are created when missing; existing rows are deleted, the tables
    themselves are kept.
    """
    if seat_count < 0:
        raise ValueError(f"seat_count cannot be negative, got {seat_count}")
    if any(price < 0 for price in price_list):
        raise ValueError(f"Prices cannot be negative, got {list(price_list)}")

    with UnitOfWork(db, "init_data_store") as uow:
        Base.metadata.create_all(bind=db.connection())

        BookingRepository(db).delete_all()
        SeatRepository(db).reset(seat_count)
        CategoryRepository(db).reset(price_list)
        uow.commit()

    logger.info(
        "Data store initialized with %s seats and prices %s",
        seat_count,
        list(price_list),
    )
    return True

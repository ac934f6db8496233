# seatbook/infrastructure/repositories/seat_repository.py

from typing import Iterable

from sqlalchemy.orm import Session
from sqlalchemy import select, update, delete

from seatbook.infrastructure.db.models import Seat


class SeatRepository:

    def __init__(self, db: Session):
        self.db = db

    def list_available(self, lock: bool = False) -> list[int]:
        """
        Available seat numbers, ascending.
        With lock=True: SELECT ... FOR UPDATE, so no other transaction
        can book these seats until ours ends.
        """

        stmt = (
            select(Seat.id)
            .where(Seat.available.is_(True))
            .order_by(Seat.id)
        )
        if lock:
            stmt = stmt.with_for_update()

        return list(self.db.execute(stmt).scalars().all())

    def set_availability(
        self,
        seats: Iterable[int],
        available: bool,
    ) -> None:

        seats = list(seats)
        if not seats:
            return

        self.db.execute(
            update(Seat)
            .where(Seat.id.in_(seats))
            .values(available=available)
        )

    def reset(self, seat_count: int) -> None:
        self.db.execute(delete(Seat))
        self.db.add_all(
            Seat(id=number, available=True)
            for number in range(1, seat_count + 1)
        )

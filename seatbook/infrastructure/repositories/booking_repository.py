# seatbook/infrastructure/repositories/booking_repository.py

from sqlalchemy.orm import Session
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from seatbook.infrastructure.db.models import BookingRecord


class BookingRepository:

    def __init__(self, db: Session):
        self.db = db

    def get_by_seat(
        self,
        seat: int,
        lock: bool = False,
    ) -> BookingRecord | None:

        stmt = select(BookingRecord).where(BookingRecord.seat_id == seat)
        if lock:
            stmt = stmt.with_for_update()

        return self.db.execute(stmt).scalar_one_or_none()

    def list_for_customer(self, customer: str) -> list[BookingRecord]:
        """
        Bookings of one customer, or every booking when customer is "".
        Ordered by seat.
        """

        stmt = select(BookingRecord).order_by(BookingRecord.seat_id)
        if customer != "":
            stmt = stmt.where(BookingRecord.customer == customer)

        return list(self.db.execute(stmt).scalars().all())

    def create(
        self,
        seat: int,
        customer: str,
        category: int,
        price: float,
    ) -> BookingRecord:

        booking = BookingRecord(
            seat_id=seat,
            customer=customer,
            category_id=category,
            price=price,
        )

        self.db.add(booking)
        return booking

    def delete(self, seat: int) -> None:
        self.db.execute(
            delete(BookingRecord).where(BookingRecord.seat_id == seat)
        )

    def delete_all(self) -> None:
        self.db.execute(delete(BookingRecord))

    @staticmethod
    def is_seat_conflict(exc: IntegrityError) -> bool:
        """True when `exc` is the one-booking-per-seat constraint firing."""
        message = str(exc.orig)
        return "uq_booking_seat" in message or "bookings.seat_id" in message

# seatbook/infrastructure/db/models.py

from sqlalchemy import (
    String,
    Integer,
    Float,
    Boolean,
    UniqueConstraint,
    CheckConstraint,
    ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column

from seatbook.infrastructure.db.session import Base
from seatbook.domain.booking import Booking, IdentifiedBooking


class Seat(Base):
    """
    One numbered seat of the venue.
    Rows are created at initialization; only `available` changes afterwards.
    """

    __tablename__ = "seats"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )
    available: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    __table_args__ = (
        CheckConstraint("id >= 1", name="ck_seat_number_positive"),
    )


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=False,
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        CheckConstraint("id >= 0", name="ck_category_id_nonnegative"),
        CheckConstraint("price >= 0", name="ck_category_price_nonnegative"),
    )


class BookingRecord(Base):
    """
    Booking ledger row.
    The price is copied from the category when the booking is made.
    """

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    seat_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("seats.id"),
        nullable=False,
    )
    customer: Mapped[str] = mapped_column(String(64), nullable=False)
    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
    )
    price: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (
        UniqueConstraint("seat_id", name="uq_booking_seat"),
        CheckConstraint("price >= 0", name="ck_booking_price_nonnegative"),
        {"sqlite_autoincrement": True},
    )

    def to_domain(self, with_id: bool = True) -> Booking:
        if with_id:
            return IdentifiedBooking(
                seat=self.seat_id,
                customer=self.customer,
                category=self.category_id,
                price=self.price,
                id=self.id,
            )
        return Booking(
            seat=self.seat_id,
            customer=self.customer,
            category=self.category_id,
            price=self.price,
        )

import logging
from typing import Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from seatbook.domain.allocator import Allocation, SeatAllocator
from seatbook.domain.booking import Booking
from seatbook.domain.demand import CountDemand, SeatDemand
from seatbook.infrastructure.db.session import SessionLocal, build_engine, build_session_factory
from seatbook.infrastructure.db.unit_of_work import UnitOfWork
from seatbook.infrastructure.repositories.booking_repository import BookingRepository
from seatbook.infrastructure.repositories.category_repository import CategoryRepository
from seatbook.infrastructure.repositories.seat_repository import SeatRepository

logger = logging.getLogger(__name__)

STABLE_ISOLATION_LEVEL = "SERIALIZABLE"


class BookingService:
    """
    Application service running each booking operation as one unit of work.

    An instance holds a single session and is meant for a single caller.
    Nothing about seats is cached between calls: every decision re-reads
    the store inside its own transaction.
    """

    def __init__(self, db: Session, with_ids: bool = True):
        self.db = db
        self.with_ids = with_ids
        self.seat_repository = SeatRepository(db)
        self.category_repository = CategoryRepository(db)
        self.booking_repository = BookingRepository(db)
        self._stable_hold = False

    def __enter__(self) -> "BookingService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Releases the session. An open stable read is rolled back."""
        self._stable_hold = False
        self.db.close()

    @property
    def holding_stable_read(self) -> bool:
        return self._stable_hold and self.db.in_transaction()

    # -----------------------------
    # Reads
    # -----------------------------
    def get_price_list(self) -> list[float]:
        with self._read("get_price_list"):
            return self.category_repository.price_list()

    def get_available_seats(self, stable: bool = False) -> list[int]:
        """
        Available seat numbers, ascending.

        In stable mode the transaction is opened at SERIALIZABLE isolation
        (on SQLite it takes the database write lock instead), the returned
        seats are locked and the transaction is left open until the next
        booking or cancellation on this service. This is a demonstration
        mode: other sessions trying to book meanwhile block, and fail with
        DataAccessError once the store gives up waiting.
        """
        if not stable:
            with self._read("get_available_seats"):
                return self.seat_repository.list_available()

        with UnitOfWork(
            self.db,
            "get_available_seats",
            isolation_level=self._stable_isolation_level(),
            keep_open=True,
        ):
            seats = self.seat_repository.list_available(lock=True)

        self._stable_hold = True
        logger.debug("Holding %s seats until the next booking call", len(seats))
        return seats

    def get_bookings(self, customer: str = "") -> list[Booking]:
        """
        Bookings of `customer`, or of every customer when it is "".
        Sorted by seat.
        """
        with self._read("get_bookings"):
            records = self.booking_repository.list_for_customer(customer)
            return [record.to_domain(self.with_ids) for record in records]

    # -----------------------------
    # Bookings
    # -----------------------------
    def book_by_count(
        self,
        customer: str,
        counts: Sequence[int],
        adjoining: bool = False,
    ) -> list[Booking]:
        """
        Books counts[i] seats in category i, picked by the allocator.
        All or nothing: returns [] when the demand cannot be met,
        including when a concurrent booking takes one of the picked seats.
        Bookings come back in ascending seat order.
        """
        demand = CountDemand(counts=counts, adjoining=adjoining)

        with self._write("book_by_count") as uow:
            available = self.seat_repository.list_available(lock=True)
            prices = self.category_repository.price_list()

            allocation = SeatAllocator.allocate(available, len(prices), demand)
            if allocation is None:
                logger.info(
                    "Booking rejected for %s: counts=%s adjoining=%s",
                    customer,
                    list(demand.counts),
                    adjoining,
                )
                return []

            bookings = self._write_bookings(customer, allocation, prices)
            if not bookings:
                return []
            uow.commit()

        logger.info("Booked seats %s for %s", allocation.seats, customer)
        return bookings

    def book_by_seats(
        self,
        customer: str,
        seats_per_category: Sequence[Sequence[int]],
    ) -> list[Booking]:
        """
        Books the given seats, seats_per_category[i] in category i.
        All or nothing: returns [] if any seat is taken or repeated.
        """
        demand = SeatDemand(seats_per_category=seats_per_category)

        with self._write("book_by_seats") as uow:
            available = self.seat_repository.list_available(lock=True)
            prices = self.category_repository.price_list()

            allocation = SeatAllocator.check_seats(available, len(prices), demand)
            if allocation is None:
                logger.info(
                    "Booking rejected for %s: seats=%s",
                    customer,
                    [list(seats) for seats in demand.seats_per_category],
                )
                return []

            bookings = self._write_bookings(customer, allocation, prices)
            if not bookings:
                return []
            uow.commit()

        logger.info("Booked seats %s for %s", allocation.seats, customer)
        return bookings

    # -----------------------------
    # Cancellation
    # -----------------------------
    def cancel_bookings(self, bookings: Sequence[Booking]) -> bool:
        """
        Cancels every given booking, or none of them.

        Each booking is checked against the stored one for its seat
        (seat, customer, category, price, and id when bookings carry one).
        Returns False without touching the store if any check fails.
        """
        bookings = list(bookings)

        with self._write("cancel_bookings") as uow:
            seats: list[int] = []

            # Lock in seat order so concurrent cancellations cannot deadlock.
            for booking in sorted(bookings, key=lambda b: b.seat):
                if booking.seat in seats:
                    logger.info("Cancellation rejected: seat %s listed twice", booking.seat)
                    return False

                record = self.booking_repository.get_by_seat(booking.seat, lock=True)
                if record is None:
                    logger.info("Cancellation rejected: seat %s is not booked", booking.seat)
                    return False

                if not booking.matches(record.to_domain(self.with_ids)):
                    logger.info("Cancellation rejected: %r does not match the store", booking)
                    return False

                seats.append(booking.seat)

            for seat in seats:
                self.booking_repository.delete(seat)
            self.seat_repository.set_availability(seats, available=True)
            uow.commit()

        logger.info("Cancelled bookings for seats %s", seats)
        return True

    # -----------------------------
    # Internals
    # -----------------------------
    def _read(self, operation: str) -> UnitOfWork:
        # Reads made during a stable hold must not end it.
        return UnitOfWork(self.db, operation, keep_open=self.holding_stable_read)

    def _write(self, operation: str) -> UnitOfWork:
        # Joins the held transaction, if any, and always ends it.
        self._stable_hold = False
        return UnitOfWork(self.db, operation)

    def _stable_isolation_level(self) -> str | None:
        # SQLite transactions are already serializable and the engine opens
        # them with BEGIN IMMEDIATE, so the write lock is the hold.
        if self.db.get_bind().dialect.name == "sqlite":
            return None
        return STABLE_ISOLATION_LEVEL

    def _write_bookings(
        self,
        customer: str,
        allocation: Allocation,
        prices: Sequence[float],
    ) -> list[Booking]:
        records = [
            self.booking_repository.create(
                seat=assignment.seat,
                customer=customer,
                category=assignment.category,
                price=prices[assignment.category],
            )
            for assignment in allocation.assignments
        ]
        self.seat_repository.set_availability(allocation.seats, available=False)

        try:
            self.db.flush()
        except IntegrityError as exc:
            if not BookingRepository.is_seat_conflict(exc):
                raise
            # Another session booked one of the seats after our read.
            logger.info(
                "Booking rejected for %s: seats %s taken concurrently",
                customer,
                allocation.seats,
            )
            return []

        return [record.to_domain(self.with_ids) for record in records]


def connect(database_url: str | None = None, with_ids: bool = True) -> BookingService:
    """
    Opens a BookingService on its own session.
    Without a URL, the configured DATABASE_URL engine is used.
    """
    if database_url is None:
        return BookingService(SessionLocal(), with_ids=with_ids)

    factory = build_session_factory(build_engine(database_url))
    return BookingService(factory(), with_ids=with_ids)

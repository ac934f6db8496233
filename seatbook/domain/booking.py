# seatbook/domain/booking.py

from dataclasses import dataclass

from seatbook.domain.exceptions import MixedBookingIdentityError


@dataclass(frozen=True, eq=False)
class Booking:
    """
    A booked seat: who booked it, in which price category, at which price.

    Bookings without an ID are identified by their whole content.
    The price is the category price captured when the booking was made.
    """

    seat: int
    customer: str
    category: int
    price: float

    def _identity(self) -> tuple:
        return (self.seat, self.customer, self.category, self.price)

    def _ensure_same_policy(self, other: "Booking") -> None:
        if isinstance(self, IdentifiedBooking) != isinstance(other, IdentifiedBooking):
            raise MixedBookingIdentityError(self, other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Booking):
            return NotImplemented
        self._ensure_same_policy(other)
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def matches(self, stored: "Booking") -> bool:
        """
        Returns True if every field of this booking agrees with the stored one.

        Unlike ==, the content is compared even for identified bookings.
        """
        self._ensure_same_policy(stored)
        return (
            self.seat == stored.seat
            and self.customer == stored.customer
            and self.category == stored.category
            and self.price == stored.price
        )


@dataclass(frozen=True, eq=False)
class IdentifiedBooking(Booking):
    """Booking identified by a positive ID assigned by the store."""

    id: int

    def __post_init__(self) -> None:
        if not isinstance(self.id, int) or self.id <= 0:
            raise ValueError(f"Booking id must be a positive integer, got {self.id!r}")

    def _identity(self) -> tuple:
        return (self.id,)

    def matches(self, stored: Booking) -> bool:
        return super().matches(stored) and self.id == stored.id

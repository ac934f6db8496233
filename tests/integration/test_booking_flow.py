from sqlalchemy import update

from seatbook.application.booking_service import BookingService
from seatbook.domain.booking import Booking, IdentifiedBooking
from seatbook.infrastructure.db.models import Category


def test_initial_state(service):
    assert service.get_available_seats() == [1, 2, 3, 4, 5]
    assert service.get_price_list() == [100.0, 50.0, 75.0]
    assert service.get_bookings() == []


def test_book_one_seat(service):
    bookings = service.book_by_count("Smith", [1, 0, 0])

    assert len(bookings) == 1
    booking = bookings[0]
    assert isinstance(booking, IdentifiedBooking)
    assert (booking.seat, booking.customer, booking.category, booking.price) == (1, "Smith", 0, 100.0)
    assert service.get_available_seats() == [2, 3, 4, 5]
    assert service.get_bookings("Smith") == bookings


def test_rejected_booking_leaves_store_unchanged(service):
    service.book_by_count("Smith", [1, 0, 0])
    before = service.get_available_seats()

    assert service.book_by_count("Jones", [0, 0, 6], adjoining=True) == []
    assert service.book_by_count("Jones", [2, 2, 1]) == []

    assert service.get_available_seats() == before
    assert service.get_bookings("Jones") == []


def test_adjoining_picks_the_only_run(service):
    service.book_by_seats("Holder", [[1, 3]])
    assert service.get_available_seats() == [2, 4, 5]

    bookings = service.book_by_count("Lee", [2], adjoining=True)

    assert [b.seat for b in bookings] == [4, 5]
    assert service.get_available_seats() == [2]


def test_adjoining_rejected_when_no_run(service):
    service.book_by_seats("Holder", [[2, 4]])

    assert service.book_by_count("Lee", [2], adjoining=True) == []
    assert service.get_available_seats() == [1, 3, 5]


def test_categories_follow_seat_order(service):
    bookings = service.book_by_count("Smith", [1, 2, 1])

    assert [(b.seat, b.category, b.price) for b in bookings] == [
        (1, 0, 100.0),
        (2, 1, 50.0),
        (3, 1, 50.0),
        (4, 2, 75.0),
    ]


def test_book_explicit_seats(service):
    bookings = service.book_by_seats("Smith", [[5, 2], [], [3]])

    assert [(b.seat, b.category, b.price) for b in bookings] == [
        (5, 0, 100.0),
        (2, 0, 100.0),
        (3, 2, 75.0),
    ]
    assert service.get_available_seats() == [1, 4]


def test_explicit_seats_all_or_nothing(service):
    service.book_by_seats("Smith", [[3]])

    assert service.book_by_seats("Jones", [[1, 2], [3]]) == []
    assert service.book_by_seats("Jones", [[1], [1]]) == []
    assert service.book_by_seats("Jones", [[1], [], [], [2]]) == []

    assert service.get_available_seats() == [1, 2, 4, 5]


def test_bookings_listed_by_customer(service):
    service.book_by_seats("Smith", [[4]])
    service.book_by_seats("Jones", [[2]])
    service.book_by_seats("Smith", [[1]])

    assert [b.seat for b in service.get_bookings("Smith")] == [1, 4]
    assert [b.seat for b in service.get_bookings("Jones")] == [2]
    assert [b.seat for b in service.get_bookings("")] == [1, 2, 4]
    assert service.get_bookings("Nobody") == []


def test_price_captured_at_booking_time(service, session_factory):
    first = service.book_by_count("Smith", [1])

    db = session_factory()
    try:
        db.execute(update(Category).where(Category.id == 0).values(price=120.0))
        db.commit()
    finally:
        db.close()

    second = service.book_by_count("Smith", [1])

    assert first[0].price == 100.0
    assert second[0].price == 120.0
    assert [b.price for b in service.get_bookings("Smith")] == [100.0, 120.0]


def test_seat_taken_by_another_session(service, other_service):
    service.book_by_seats("Smith", [[1]])

    assert other_service.book_by_seats("Jones", [[1]]) == []
    assert other_service.get_available_seats() == [2, 3, 4, 5]


def test_unidentified_store(session_factory):
    with BookingService(session_factory(), with_ids=False) as service:
        bookings = service.book_by_count("Smith", [1])

        assert bookings == [Booking(1, "Smith", 0, 100.0)]
        assert not isinstance(bookings[0], IdentifiedBooking)
        assert service.cancel_bookings([Booking(1, "Smith", 0, 100.0)])

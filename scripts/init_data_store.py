import logging
import os

from seatbook.application.booking_service import BookingService
from seatbook.application.data_store import init_data_store, wait_for_db
from seatbook.infrastructure.db.session import SessionLocal, engine


SEAT_COUNT = 5
PRICE_LIST = [100.0, 50.0, 75.0]


def main() -> None:
    logging.basicConfig(
        level=os.getenv("SEATBOOK_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    wait_for_db(engine)

    with BookingService(SessionLocal()) as service:
        init_data_store(service.db, SEAT_COUNT, PRICE_LIST)
        print(f"Seed complete: {SEAT_COUNT} seats, prices {service.get_price_list()}.")
        print(f"Available seats: {service.get_available_seats()}")


if __name__ == "__main__":
    main()

import os

# The module-level engine is built at import time; keep it off Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest

from seatbook.application.booking_service import BookingService
from seatbook.application.data_store import init_data_store
from seatbook.infrastructure.db.session import build_engine, build_session_factory


SEAT_COUNT = 5
PRICE_LIST = [100.0, 50.0, 75.0]


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'venue.db'}"


@pytest.fixture
def engine(database_url):
    engine = build_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = build_session_factory(engine)

    db = factory()
    try:
        init_data_store(db, SEAT_COUNT, PRICE_LIST)
    finally:
        db.close()

    return factory


@pytest.fixture
def service(session_factory):
    with BookingService(session_factory()) as service:
        yield service


@pytest.fixture
def other_service(session_factory):
    with BookingService(session_factory()) as service:
        yield service


@pytest.fixture
def impatient_service(database_url, session_factory):
    # Gives up on a locked database after 0.1s instead of SQLite's 5s.
    engine = build_engine(database_url, connect_args={"timeout": 0.1})
    with BookingService(build_session_factory(engine)()) as service:
        yield service
    engine.dispose()

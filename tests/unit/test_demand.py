# tests/unit/test_demand.py

import pytest
from pydantic import ValidationError

from seatbook.domain.demand import CountDemand, SeatDemand


def test_count_demand_total():
    demand = CountDemand(counts=[1, 0, 2], adjoining=True)

    assert demand.total == 3
    assert demand.counts == (1, 0, 2)


def test_seat_demand_total():
    assert SeatDemand(seats_per_category=[[1, 2], [], [5]]).total == 3


@pytest.mark.parametrize(
    "counts",
    [
        [-1],
        [1, -2],
        ["2"],
        [1.5],
    ],
)
def test_malformed_counts_rejected(counts):
    with pytest.raises(ValidationError):
        CountDemand(counts=counts)


def test_adjoining_must_be_bool():
    with pytest.raises(ValidationError):
        CountDemand(counts=[1], adjoining="yes")


@pytest.mark.parametrize("seat", [0, -3])
def test_seat_numbers_start_at_one(seat):
    with pytest.raises(ValidationError):
        SeatDemand(seats_per_category=[[seat]])

# seatbook/domain/allocator.py

import logging
from dataclasses import dataclass
from typing import NamedTuple, Sequence

from seatbook.domain.demand import CountDemand, SeatDemand

logger = logging.getLogger(__name__)


class SeatAssignment(NamedTuple):
    seat: int
    category: int


@dataclass(frozen=True)
class Allocation:
    """Seats picked for a demand, each tagged with its price category."""

    assignments: tuple[SeatAssignment, ...]

    @property
    def seats(self) -> list[int]:
        return [assignment.seat for assignment in self.assignments]


class SeatAllocator:
    """
    Decides which seats satisfy a demand.
    Works on a snapshot of the available seats and never touches the store:
    the caller owns the transaction around it.

    Every method returns either a complete Allocation or None.
    """

    @classmethod
    def allocate(
        cls,
        available: Sequence[int],
        category_count: int,
        demand: CountDemand,
    ) -> Allocation | None:
        """
        Picks seats for a count-by-category demand.

        The lowest selected seats go to category 0, the next ones
        to category 1, and so on.
        """
        cls._ensure_ascending(available)

        if not cls._categories_exist(demand.counts, category_count):
            return None

        total = demand.total
        if total > len(available):
            logger.info(
                "Rejected: %s seats requested, %s available",
                total,
                len(available),
            )
            return None

        if demand.adjoining:
            selected = cls.find_adjoining_run(available, total)
            if selected is None:
                logger.info("Rejected: no run of %s adjoining seats", total)
                return None
        else:
            selected = list(available[:total])

        categories = [
            category
            for category, count in enumerate(demand.counts)
            for _ in range(count)
        ]
        return Allocation(
            assignments=tuple(
                SeatAssignment(seat, category)
                for seat, category in zip(selected, categories)
            )
        )

    @classmethod
    def check_seats(
        cls,
        available: Sequence[int],
        category_count: int,
        demand: SeatDemand,
    ) -> Allocation | None:
        """
        Validates an explicit seat request. Assignments keep the
        requested order, grouped by category.
        """
        cls._ensure_ascending(available)

        counts = [len(seats) for seats in demand.seats_per_category]
        if not cls._categories_exist(counts, category_count):
            return None

        free = set(available)
        seen: set[int] = set()
        assignments = []

        for category, seats in enumerate(demand.seats_per_category):
            for seat in seats:
                if seat in seen:
                    logger.info("Rejected: seat %s requested twice", seat)
                    return None
                if seat not in free:
                    logger.info("Rejected: seat %s is not available", seat)
                    return None
                seen.add(seat)
                assignments.append(SeatAssignment(seat, category))

        return Allocation(assignments=tuple(assignments))

    @staticmethod
    def find_adjoining_run(available: Sequence[int], length: int) -> list[int] | None:
        """
        Returns the first run of `length` consecutive seat numbers,
        or None if the available seats hold no such run.
        """
        if length == 0:
            return []

        run_start = 0
        for index in range(len(available)):
            if index > 0 and available[index] != available[index - 1] + 1:
                run_start = index
            if index - run_start + 1 == length:
                return list(available[run_start:index + 1])

        return None

    @staticmethod
    def _categories_exist(counts: Sequence[int], category_count: int) -> bool:
        for category in range(category_count, len(counts)):
            if counts[category] > 0:
                logger.info(
                    "Rejected: category %s does not exist (%s categories)",
                    category,
                    category_count,
                )
                return False
        return True

    @staticmethod
    def _ensure_ascending(available: Sequence[int]) -> None:
        """
        Guard against snapshots that are not strictly ascending.
        """
        for previous, current in zip(available, available[1:]):
            if current <= previous:
                raise ValueError(
                    f"Available seats must be strictly ascending, got {previous} before {current}"
                )

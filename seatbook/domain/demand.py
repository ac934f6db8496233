from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


NonNegativeCount = Annotated[StrictInt, Field(ge=0)]
SeatNumber = Annotated[StrictInt, Field(ge=1)]


class CountDemand(BaseModel):
    """counts[i] seats wanted in category i, optionally adjoining."""

    model_config = ConfigDict(frozen=True)

    counts: tuple[NonNegativeCount, ...]
    adjoining: StrictBool = False

    @property
    def total(self) -> int:
        return sum(self.counts)


class SeatDemand(BaseModel):
    """seats_per_category[i] lists the seat numbers wanted in category i."""

    model_config = ConfigDict(frozen=True)

    seats_per_category: tuple[tuple[SeatNumber, ...], ...]

    @property
    def total(self) -> int:
        return sum(len(seats) for seats in self.seats_per_category)

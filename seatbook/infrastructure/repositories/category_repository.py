# seatbook/infrastructure/repositories/category_repository.py

from typing import Sequence

from sqlalchemy.orm import Session
from sqlalchemy import select, delete

from seatbook.infrastructure.db.models import Category


class CategoryRepository:

    def __init__(self, db: Session):
        self.db = db

    def price_list(self) -> list[float]:
        """Prices indexed by category number."""

        stmt = select(Category.price).order_by(Category.id)
        return list(self.db.execute(stmt).scalars().all())

    def reset(self, prices: Sequence[float]) -> None:
        self.db.execute(delete(Category))
        self.db.add_all(
            Category(id=number, price=price)
            for number, price in enumerate(prices)
        )

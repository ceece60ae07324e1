"""Named id counters."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hostel_orders.db.base import Base

ORDERS_COUNTER = "orders"
FOOD_ITEMS_COUNTER = "food_items"


class Counter(Base):
    """Monotonic integer sequence used to allocate public ids."""

    __tablename__ = "counters"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

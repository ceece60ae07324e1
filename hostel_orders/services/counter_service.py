"""Atomic id allocation backed by the ``counters`` table."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hostel_orders.models.counter import FOOD_ITEMS_COUNTER, ORDERS_COUNTER, Counter

DEFAULT_COUNTERS: tuple[str, ...] = (ORDERS_COUNTER, FOOD_ITEMS_COUNTER)


def ensure_counters(db: Session, names: Iterable[str] = DEFAULT_COUNTERS) -> None:
    """Create missing counter rows at zero so allocation always has a row to lock."""
    for name in names:
        if db.get(Counter, name) is None:
            db.add(Counter(name=name, value=0))
    db.flush()


def _locked_counter(db: Session, name: str) -> Counter:
    query = select(Counter).where(Counter.name == name).with_for_update()
    counter: Counter | None = db.scalar(query)
    if counter is None:
        try:
            with db.begin_nested():
                db.add(Counter(name=name, value=0))
        except IntegrityError:
            # A concurrent transaction inserted the row first; lock theirs.
            pass
        counter = db.scalar(query)
    return counter


def next_value(db: Session, name: str) -> int:
    """Increment the named counter inside the caller's transaction."""
    counter = _locked_counter(db, name)
    counter.value += 1
    db.flush()
    return counter.value


def ensure_at_least(db: Session, name: str, value: int) -> None:
    """Make sure future allocations never hand out ``value`` again."""
    counter = _locked_counter(db, name)
    if counter.value < value:
        counter.value = value
        db.flush()

"""Counter bootstrap and id allocation tests."""

from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from hostel_orders.core.config import settings
from hostel_orders.db.base import Base
from hostel_orders.db.seed import ensure_seed_data
from hostel_orders.models.counter import FOOD_ITEMS_COUNTER, ORDERS_COUNTER, Counter
from hostel_orders.models.food import FoodItem
from hostel_orders.services.counter_service import next_value


def _build_session_factory(tmp_path: Path) -> sessionmaker:
    engine = create_engine(f"sqlite:///{tmp_path / 'counters.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def test_seed_creates_counters_outside_dev(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "app_env", "production")
    session_factory = _build_session_factory(tmp_path)

    with session_factory() as db:
        ensure_seed_data(db)
        counters = {counter.name: counter.value for counter in db.scalars(select(Counter))}
        food_count = len(db.scalars(select(FoodItem)).all())

    assert counters == {ORDERS_COUNTER: 0, FOOD_ITEMS_COUNTER: 0}
    assert food_count == 0


def test_seed_keeps_existing_counter_values(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "app_env", "production")
    session_factory = _build_session_factory(tmp_path)

    with session_factory() as db:
        db.add(Counter(name=ORDERS_COUNTER, value=41))
        db.commit()
        ensure_seed_data(db)

        assert next_value(db, ORDERS_COUNTER) == 42


def test_counter_row_created_concurrently_is_reused(tmp_path: Path, monkeypatch) -> None:
    """A row inserted by another transaction between lookup and insert is locked and incremented."""
    session_factory = _build_session_factory(tmp_path)

    with session_factory() as db:
        original_scalar = db.scalar
        lookups: list[int] = []

        def scalar_with_competing_insert(statement, *args, **kwargs):
            result = original_scalar(statement, *args, **kwargs)
            if not lookups:
                lookups.append(1)
                with session_factory() as other:
                    other.add(Counter(name=ORDERS_COUNTER, value=7))
                    other.commit()
            return result

        monkeypatch.setattr(db, "scalar", scalar_with_competing_insert)

        allocated = next_value(db, ORDERS_COUNTER)
        db.commit()

    assert allocated == 8
    with session_factory() as db:
        assert db.get(Counter, ORDERS_COUNTER).value == 8

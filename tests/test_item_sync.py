"""Edit-time item reconciliation tests."""

from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

from hostel_orders.db.base import Base
from hostel_orders.models.counter import FOOD_ITEMS_COUNTER
from hostel_orders.models.food import FoodItem
from hostel_orders.models.order import Order, OrderItem
from hostel_orders.schemas.order import OrderCreate, OrderItemCreate, OrderItemUpdate, OrderPatch
from hostel_orders.services import pricing
from hostel_orders.services.counter_service import next_value
from hostel_orders.services.errors import EditForbiddenError, ValidationError
from hostel_orders.services.food_service import create_food_item
from hostel_orders.services.item_sync import sync_items
from hostel_orders.services.order_service import create_order, update_order

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def _build_session(tmp_path: Path) -> Session:
    engine = create_engine(f"sqlite:///{tmp_path / 'sync.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _create_order(db: Session, order_type: str = "DELIVERY") -> Order:
    order, _ = create_order(
        db,
        OrderCreate(
            customer="Guest",
            order_type=order_type,
            items=[
                OrderItemCreate(name="Chicken Adobo", quantity=2, unit_price=Decimal("50")),
                OrderItemCreate(name="Garlic Rice", quantity=1, unit_price=Decimal("30")),
            ],
        ),
        now=NOW,
    )
    db.commit()
    return order


@pytest.fixture(autouse=True)
def _fixed_fee(monkeypatch) -> None:
    monkeypatch.setattr(pricing, "DELIVERY_FEE", Decimal("15.00"))


def test_remove_one_item_and_add_new_catalog_item(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        adobo_id, rice_id = [item.id for item in order.items]

        sync_items(
            db,
            order,
            [
                OrderItemUpdate(id=adobo_id, name="Chicken Adobo", quantity=3, unit_price=Decimal("50")),
                OrderItemUpdate(food_id=999, name="Halo-halo", quantity=2, unit_price=Decimal("45.50")),
            ],
        )
        db.commit()

        item_ids = {item.id for item in order.items}
        assert rice_id not in item_ids
        assert adobo_id in item_ids
        assert order.total == Decimal("256.00")
        assert db.scalar(select(OrderItem).where(OrderItem.id == rice_id)) is None

        food = db.get(FoodItem, 999)
        assert food is not None
        assert food.name == "Halo-halo"
        assert food.price == Decimal("45.50")
        assert next_value(db, FOOD_ITEMS_COUNTER) == 1000


def test_new_item_refreshes_existing_catalog_entry(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        food = create_food_item(db, name="Iced Tea", price=Decimal("35.00"))
        order = _create_order(db, order_type="PICKUP")
        existing = [
            OrderItemUpdate(id=item.id, name=item.name, quantity=item.quantity, unit_price=item.unit_price)
            for item in order.items
        ]

        sync_items(
            db,
            order,
            [*existing, OrderItemUpdate(food_id=food.id, name="Iced Tea (Large)", quantity=1, unit_price=Decimal("40"))],
        )
        db.commit()

        refreshed = db.get(FoodItem, food.id)
        assert refreshed.name == "Iced Tea (Large)"
        assert refreshed.price == Decimal("40.00")
        assert order.total == Decimal("170.00")
        assert len(order.items) == 3


def test_updated_item_line_total_is_recomputed(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        adobo, rice = order.items

        sync_items(
            db,
            order,
            [
                OrderItemUpdate(id=adobo.id, name="Adobo Special", quantity=1, unit_price=Decimal("75.25"), notes="no onions"),
                OrderItemUpdate(id=rice.id, name="Garlic Rice", quantity=4, unit_price=Decimal("30")),
            ],
        )
        db.commit()

        assert adobo.name == "Adobo Special"
        assert adobo.notes == "no onions"
        assert adobo.line_total == Decimal("75.25")
        assert rice.line_total == Decimal("120.00")
        assert order.total == Decimal("210.25")


def test_id_from_another_order_is_treated_as_new_item(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        other = _create_order(db)
        foreign_item = other.items[0]

        sync_items(db, order, [OrderItemUpdate(id=foreign_item.id, name="Soup", quantity=1, unit_price=Decimal("20"))])
        db.commit()

        assert [item.name for item in order.items] == ["Soup"]
        assert order.items[0].id != foreign_item.id
        assert other.items[0].name == "Chicken Adobo"
        assert order.total == Decimal("35.00")


def test_sync_rejected_for_accepted_order(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        update_order(db, order.id, OrderPatch(status="ACCEPTED"), now=NOW)
        db.commit()

        with pytest.raises(EditForbiddenError):
            sync_items(db, order, [OrderItemUpdate(name="Soup", quantity=1, unit_price=Decimal("20"))])

        assert len(order.items) == 2
        assert order.total == Decimal("145.00")


def test_sync_rejects_empty_item_list(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)

        with pytest.raises(ValidationError, match="items required"):
            sync_items(db, order, [])


def test_sync_rejects_duplicate_item_ids(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        adobo, rice = order.items

        with pytest.raises(ValidationError, match="more than once"):
            sync_items(
                db,
                order,
                [
                    OrderItemUpdate(id=adobo.id, name="Chicken Adobo", quantity=1, unit_price=Decimal("50")),
                    OrderItemUpdate(id=adobo.id, name="Chicken Adobo", quantity=3, unit_price=Decimal("50")),
                    OrderItemUpdate(id=rice.id, name="Garlic Rice", quantity=1, unit_price=Decimal("30")),
                ],
            )

        assert len(order.items) == 2
        assert adobo.quantity == 2
        assert order.total == Decimal("145.00")


def test_invalid_patch_leaves_items_untouched(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        order_id = order.id
        rice_id = order.items[1].id

        with pytest.raises(ValidationError):
            update_order(
                db,
                order_id,
                OrderPatch(
                    email="broken",
                    items=[OrderItemUpdate(id=rice_id, name="Garlic Rice", quantity=9, unit_price=Decimal("30"))],
                ),
                now=NOW,
            )
        db.rollback()

        reloaded = db.get(Order, order_id)
        assert len(reloaded.items) == 2
        assert reloaded.total == Decimal("145.00")


def test_patch_items_through_update_order(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        order = _create_order(db)
        adobo_id = order.items[0].id

        updated, event = update_order(
            db,
            order.id,
            OrderPatch(items=[OrderItemUpdate(id=adobo_id, name="Chicken Adobo", quantity=1, unit_price=Decimal("50"))]),
            now=NOW,
        )
        db.commit()

        assert event is None
        assert [item.id for item in updated.items] == [adobo_id]
        assert updated.total == Decimal("65.00")

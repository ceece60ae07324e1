"""Food catalog operations."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_orders.models.counter import FOOD_ITEMS_COUNTER
from hostel_orders.models.food import FoodItem
from hostel_orders.services.counter_service import ensure_at_least, next_value
from hostel_orders.services.errors import NotFoundError, ValidationError
from hostel_orders.services.pricing import to_money
from hostel_orders.services.validators import validate_food_item

logger = logging.getLogger(__name__)


def list_food_items(db: Session, *, available_only: bool = False) -> list[FoodItem]:
    query = select(FoodItem).order_by(FoodItem.id.asc())
    if available_only:
        query = query.where(FoodItem.available.is_(True))
    return list(db.scalars(query).all())


def get_food_item(db: Session, food_id: int) -> FoodItem:
    food_item: FoodItem | None = db.get(FoodItem, food_id)
    if food_item is None:
        raise NotFoundError(f"Food item {food_id} not found")
    return food_item


def missing_food_ids(db: Session, food_ids: set[int]) -> list[int]:
    if not food_ids:
        return []
    existing: set[int] = set(db.scalars(select(FoodItem.id).where(FoodItem.id.in_(food_ids))).all())
    return sorted(food_ids - existing)


def _ensure_code_unique(db: Session, code: str | None, exclude_id: int | None = None) -> None:
    if not code:
        return
    query = select(FoodItem.id).where(FoodItem.code == code)
    if exclude_id is not None:
        query = query.where(FoodItem.id != exclude_id)
    if db.scalar(query.limit(1)) is not None:
        raise ValidationError("Code already exists")


def create_food_item(
    db: Session,
    *,
    name: str,
    price: Decimal,
    description: str | None = None,
    category: str | None = None,
    code: str | None = None,
    img: str | None = None,
    available: bool = True,
) -> FoodItem:
    errors = validate_food_item(name=name, price=price, category=category)
    if errors:
        raise ValidationError("; ".join(errors))
    _ensure_code_unique(db, code)

    food_item = FoodItem(
        id=next_value(db, FOOD_ITEMS_COUNTER),
        name=name.strip(),
        description=description,
        price=to_money(price),
        category=category,
        code=code or None,
        img=img,
        available=available,
    )
    db.add(food_item)
    db.flush()
    return food_item


def update_food_item(db: Session, food_id: int, changes: dict[str, Any]) -> FoodItem:
    """Apply a partial update; keys absent from ``changes`` are left alone."""
    food_item = get_food_item(db, food_id)
    errors = validate_food_item(
        name=changes.get("name", food_item.name),
        price=changes.get("price", food_item.price),
        category=changes.get("category"),
    )
    if errors:
        raise ValidationError("; ".join(errors))
    if "code" in changes:
        _ensure_code_unique(db, changes["code"], exclude_id=food_id)

    for key, value in changes.items():
        if key == "price":
            value = to_money(value)
        setattr(food_item, key, value)
    db.flush()
    return food_item


def delete_food_item(db: Session, food_id: int) -> None:
    food_item = get_food_item(db, food_id)
    db.delete(food_item)
    db.flush()


def upsert_food_item_from_order(db: Session, *, food_id: int, name: str, price: Decimal) -> FoodItem:
    """Keep the catalog in line with the latest name and price used in an order."""
    food_item: FoodItem | None = db.get(FoodItem, food_id)
    if food_item is None:
        food_item = FoodItem(id=food_id, name=name, price=to_money(price), available=True)
        db.add(food_item)
        ensure_at_least(db, FOOD_ITEMS_COUNTER, food_id)
        logger.info("[CATALOG] Created food item %s from order edit", food_id)
    else:
        food_item.name = name
        food_item.price = to_money(price)
    db.flush()
    return food_item

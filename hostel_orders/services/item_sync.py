"""Edit-time reconciliation of an order's items against a submitted list."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.orm import Session

from hostel_orders.models.order import Order, OrderItem
from hostel_orders.schemas.order import OrderItemUpdate
from hostel_orders.services.errors import ValidationError
from hostel_orders.services.food_service import upsert_food_item_from_order
from hostel_orders.services.order_status import ensure_editable
from hostel_orders.services.pricing import line_total, order_total, subtotal, to_money

logger = logging.getLogger(__name__)


def recompute_total(order: Order) -> None:
    """Re-derive the order total from its current items and order type."""
    order.total = order_total(subtotal(item.line_total for item in order.items), order.order_type)


def sync_items(db: Session, order: Order, target_items: Sequence[OrderItemUpdate]) -> None:
    """Make ``order.items`` match ``target_items`` and recompute the total.

    Lines carrying the id of one of the order's items update it; lines
    without an id (or with an id from elsewhere) are inserted; existing items
    missing from the target are deleted. Nothing is committed here: the
    caller's transaction makes the whole reconciliation atomic.
    """
    ensure_editable(order)
    if not target_items:
        raise ValidationError("items required")

    existing: dict[int, OrderItem] = {item.id: item for item in order.items}
    updates: dict[int, OrderItemUpdate] = {}
    creates: list[OrderItemUpdate] = []
    for target in target_items:
        if target.id is not None and target.id in existing:
            if target.id in updates:
                raise ValidationError(f"Item {target.id} appears more than once")
            updates[target.id] = target
        else:
            creates.append(target)

    for item_id, item in existing.items():
        if item_id not in updates:
            order.items.remove(item)

    for item_id, target in updates.items():
        item = existing[item_id]
        item.name = target.name
        item.quantity = target.quantity
        item.unit_price = to_money(target.unit_price)
        item.notes = target.notes
        item.line_total = line_total(target.quantity, target.unit_price)

    for target in creates:
        if target.food_id is not None:
            upsert_food_item_from_order(db, food_id=target.food_id, name=target.name, price=target.unit_price)
        order.items.append(
            OrderItem(
                food_id=target.food_id,
                name=target.name,
                quantity=target.quantity,
                unit_price=to_money(target.unit_price),
                notes=target.notes,
                line_total=line_total(target.quantity, target.unit_price),
            )
        )

    db.flush()
    recompute_total(order)
    logger.info(
        "[ORDERS] Synced items for order %s: %s updated, %s created, %s deleted",
        order.display_id,
        len(updates),
        len(creates),
        len(existing) - len(updates),
    )

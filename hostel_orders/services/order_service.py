"""Order aggregate operations: creation, edits, cancellation and archive handling.

Each function works inside the caller's session and never commits; the
endpoint commits once the whole operation succeeded, so a raised error
leaves nothing behind. Returned events are dispatched after the commit.
"""

from __future__ import annotations

import logging
from datetime import datetime, time
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from hostel_orders.models.audit_log import AuditLog
from hostel_orders.models.counter import ORDERS_COUNTER
from hostel_orders.models.order import Order, OrderItem
from hostel_orders.schemas.order import OrderCreate, OrderPatch
from hostel_orders.services.counter_service import next_value
from hostel_orders.services.errors import InvalidTransitionError, NotFoundError, StateConflictError, ValidationError
from hostel_orders.services.food_service import missing_food_ids
from hostel_orders.services.item_sync import recompute_total, sync_items
from hostel_orders.services.notifications import OrderEvent, build_event
from hostel_orders.services.order_status import (
    ARCHIVING_STATUSES,
    apply_transition,
    can_transition,
    ensure_archived,
    ensure_deletable,
    ensure_editable,
    restore,
)
from hostel_orders.services.pricing import line_total, to_money
from hostel_orders.services.validators import sanitize_string, validate_order_contact

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS: tuple[str, ...] = ("customer", "contact_number", "email", "address", "desired_at")


def get_order(db: Session, order_id: int, *, for_update: bool = False) -> Order:
    query = select(Order).where(Order.id == order_id).options(selectinload(Order.items))
    if for_update:
        query = query.with_for_update()
    order: Order | None = db.scalar(query)
    if order is None:
        raise NotFoundError("Order not found")
    return order


def list_orders(db: Session, *, archived: bool | None = None) -> list[Order]:
    """Return orders newest first, optionally filtered by archive state."""
    query = select(Order).options(selectinload(Order.items)).order_by(Order.created_at.desc(), Order.id.desc())
    if archived is not None:
        query = query.where(Order.archived.is_(archived))
    return list(db.scalars(query).all())


def _resolve_desired_at(payload: OrderCreate) -> datetime | None:
    if payload.date is None:
        return None
    return datetime.combine(payload.date, payload.time or time(0, 0))


def create_order(db: Session, payload: OrderCreate, now: datetime) -> tuple[Order, OrderEvent | None]:
    """Create a PENDING order from a storefront cart."""
    if not payload.items:
        raise ValidationError("items required")

    errors = validate_order_contact(
        customer=payload.customer,
        email=payload.email,
        contact_number=payload.contact_number,
        address=payload.address,
    )
    if errors:
        raise ValidationError("; ".join(errors))

    missing = missing_food_ids(db, {item.food_id for item in payload.items if item.food_id is not None})
    if missing:
        missing_list = ", ".join(str(food_id) for food_id in missing)
        raise ValidationError(f"The following food items do not exist: {missing_list}. Please check the menu.")

    order = Order(
        id=next_value(db, ORDERS_COUNTER),
        status="PENDING",
        order_type=payload.order_type,
        archived=False,
        archived_at=None,
        customer=sanitize_string(payload.customer),
        contact_number=sanitize_string(payload.contact_number),
        email=sanitize_string(payload.email),
        address=sanitize_string(payload.address),
        desired_at=_resolve_desired_at(payload),
        created_at=now,
        items=[
            OrderItem(
                food_id=item.food_id,
                name=item.name,
                quantity=item.quantity,
                unit_price=to_money(item.unit_price),
                line_total=line_total(item.quantity, item.unit_price),
                notes=item.notes,
            )
            for item in payload.items
        ],
    )
    recompute_total(order)
    db.add(order)
    db.flush()

    logger.info("[ORDERS] Created order %s (%s) total=%s", order.display_id, order.order_type, order.total)
    if order.email is None:
        logger.info("[ORDERS] Order %s created without email notification (no email provided)", order.display_id)
        return order, None
    return order, build_event("ORDER_PLACED", order)


def patch_fields(order: Order, changes: dict[str, Any]) -> None:
    """Overwrite the provided contact fields; absent keys keep their values."""
    ensure_editable(order)
    unknown = set(changes) - set(PATCHABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot patch fields: {', '.join(sorted(unknown))}")

    errors = validate_order_contact(
        customer=changes.get("customer"),
        email=changes.get("email"),
        contact_number=changes.get("contact_number"),
        address=changes.get("address"),
    )
    if errors:
        raise ValidationError("; ".join(errors))

    for key, value in changes.items():
        setattr(order, key, sanitize_string(value) if isinstance(value, str) else value)


def _check_status_change(order: Order, new_status: str | None) -> None:
    if new_status is None or new_status == order.status:
        return
    if new_status == "PENDING":
        if order.status not in ARCHIVING_STATUSES:
            raise InvalidTransitionError(f"Cannot change order status from {order.status} to PENDING")
        return
    if not can_transition(order.status, new_status):
        raise InvalidTransitionError(f"Cannot change order status from {order.status} to {new_status}")


def _apply_archived_flag(order: Order, archived: bool, archived_at: datetime | None, now: datetime) -> None:
    if archived:
        if order.status not in ARCHIVING_STATUSES:
            raise InvalidTransitionError("Only completed or cancelled orders can be archived")
        order.archived = True
        order.archived_at = archived_at or order.archived_at or now
    elif order.archived:
        restore(order)


def update_order(db: Session, order_id: int, patch: OrderPatch, now: datetime) -> tuple[Order, OrderEvent | None]:
    """Apply a back-office patch: contact fields, items, then status/archive."""
    order = get_order(db, order_id, for_update=True)
    sent = patch.model_fields_set

    field_changes = {key: getattr(patch, key) for key in PATCHABLE_FIELDS if key in sent}
    if field_changes or patch.items is not None:
        ensure_editable(order)
    _check_status_change(order, patch.status)
    if patch.archived is True:
        resulting_status = patch.status or order.status
        if resulting_status not in ARCHIVING_STATUSES:
            raise InvalidTransitionError("Only completed or cancelled orders can be archived")
    if patch.archived is False and patch.status in ARCHIVING_STATUSES:
        raise InvalidTransitionError(f"{patch.status} orders are always archived")

    if field_changes:
        patch_fields(order, field_changes)
    if patch.items is not None:
        sync_items(db, order, patch.items)

    event: OrderEvent | None = None
    if patch.status is not None and patch.status != order.status:
        if patch.status == "PENDING":
            restore(order)
        else:
            event = apply_transition(order, patch.status, now)
    if patch.archived is not None:
        _apply_archived_flag(order, patch.archived, patch.archived_at, now)

    db.flush()
    logger.info("[ORDERS] Updated order %s: status=%s archived=%s", order.display_id, order.status, order.archived)
    return order, event


def cancel_order(db: Session, order_id: int, now: datetime) -> tuple[Order, OrderEvent]:
    """Soft-delete a pending order by cancelling and archiving it."""
    order = get_order(db, order_id, for_update=True)
    ensure_deletable(order)
    if order.status == "CANCELLED":
        raise StateConflictError("Order is already cancelled")
    event = apply_transition(order, "CANCELLED", now)
    db.flush()
    logger.info("[ORDERS] Cancelled order %s", order.display_id)
    return order, event


def restore_order(db: Session, order_id: int) -> Order:
    order = get_order(db, order_id, for_update=True)
    restore(order)
    db.flush()
    logger.info("[ORDERS] Restored order %s to PENDING", order.display_id)
    return order


def permanently_delete_order(db: Session, order_id: int, now: datetime, actor_id: int | None = None) -> AuditLog:
    """Remove an archived order and its items, leaving an audit trail."""
    order = get_order(db, order_id, for_update=True)
    ensure_archived(order)

    audit = AuditLog(
        actor_user_id=actor_id,
        action="DELETE",
        table_name="orders",
        record_id=str(order.id),
        timestamp=now,
        details={
            "order_id": order.id,
            "display_id": order.display_id,
            "customer": order.customer,
            "total": str(order.total),
            "items_count": len(order.items),
            "status": order.status,
            "deleted_at": now.isoformat(),
        },
    )
    db.add(audit)
    db.delete(order)
    db.flush()
    logger.info("[ORDERS] Order %s permanently deleted and logged to audit trail", order.display_id)
    return audit

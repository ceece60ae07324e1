"""Order status transition engine.

Every status change goes through this module: it validates the move against
``ALLOWED_TRANSITIONS``, applies the archival side effects and returns the
notification event the transition implies.
"""

from __future__ import annotations

from datetime import datetime

from hostel_orders.models.order import ORDER_STATUSES as MODEL_STATUSES, Order
from hostel_orders.services.errors import EditForbiddenError, InvalidTransitionError, StateConflictError
from hostel_orders.services.notifications import OrderEvent, build_event

ORDER_STATUSES: list[str] = list(MODEL_STATUSES)

ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "PENDING": {"ACCEPTED", "CANCELLED"},
    "ACCEPTED": {"COMPLETED"},
    "COMPLETED": set(),
    "CANCELLED": set(),
}

ARCHIVING_STATUSES: frozenset[str] = frozenset({"COMPLETED", "CANCELLED"})
LOCKED_STATUSES: frozenset[str] = frozenset({"ACCEPTED", "COMPLETED"})

TRANSITION_EVENTS: dict[str, str] = {
    "ACCEPTED": "ORDER_ACCEPTED",
    "COMPLETED": "ORDER_COMPLETED",
    "CANCELLED": "ORDER_CANCELLED",
}


def can_transition(current: str, new: str) -> bool:
    """Return whether order can move from current to new status."""
    return new in ALLOWED_TRANSITIONS.get(current, set())


def apply_transition(order: Order, new_status: str, now: datetime) -> OrderEvent:
    """Move the order to ``new_status`` and return the notification to send.

    Raises ``InvalidTransitionError`` without touching the order when the
    move is not in the table.
    """
    if new_status not in ORDER_STATUSES:
        raise InvalidTransitionError(f"Unknown order status: {new_status}")
    if not can_transition(order.status, new_status):
        raise InvalidTransitionError(f"Cannot change order status from {order.status} to {new_status}")

    order.status = new_status
    if new_status in ARCHIVING_STATUSES:
        order.archived = True
        order.archived_at = now

    return build_event(TRANSITION_EVENTS[new_status], order)


def restore(order: Order) -> None:
    """Return an archived order to the active queue as PENDING."""
    if not order.archived and order.status not in ARCHIVING_STATUSES:
        raise InvalidTransitionError("Only archived orders can be restored")
    order.status = "PENDING"
    order.archived = False
    order.archived_at = None


def ensure_deletable(order: Order) -> None:
    if order.status in LOCKED_STATUSES:
        raise StateConflictError("Cannot delete orders that have been accepted or completed")


def ensure_editable(order: Order) -> None:
    if order.status in LOCKED_STATUSES:
        raise EditForbiddenError("Cannot edit orders that have been accepted or completed")


def ensure_archived(order: Order) -> None:
    if not order.archived:
        raise StateConflictError("Only archived orders can be permanently deleted")

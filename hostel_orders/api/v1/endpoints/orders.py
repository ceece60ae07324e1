"""Order endpoints: storefront checkout and back-office lifecycle."""

from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hostel_orders.core.security import get_current_admin
from hostel_orders.db.session import get_db
from hostel_orders.models.admin_user import AdminUser
from hostel_orders.schemas.order import OrderCreate, OrderPatch, OrderResponse
from hostel_orders.services.errors import OrderServiceError
from hostel_orders.services.notifications import NotificationDispatcher, OrderEvent, get_notification_dispatcher
from hostel_orders.services.order_service import (
    cancel_order,
    create_order,
    get_order,
    list_orders,
    permanently_delete_order,
    restore_order,
    update_order,
)

router: APIRouter = APIRouter()


def _http_error(exc: OrderServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def _schedule(background_tasks: BackgroundTasks, dispatcher: NotificationDispatcher, event: OrderEvent | None) -> None:
    if event is not None:
        background_tasks.add_task(dispatcher.dispatch, event)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def submit_order(
    payload: OrderCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> OrderResponse:
    """Place a storefront order; confirmation email goes out after commit."""
    try:
        order, event = create_order(db, payload, now=datetime.now(timezone.utc))
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    db.commit()
    db.refresh(order)
    _schedule(background_tasks, dispatcher, event)
    return OrderResponse.model_validate(order)


@router.get("", response_model=list[OrderResponse])
def get_orders(
    archived: bool | None = Query(default=None),
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> list[OrderResponse]:
    return [OrderResponse.model_validate(order) for order in list_orders(db, archived=archived)]


@router.get("/{order_id}", response_model=OrderResponse)
def get_single_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> OrderResponse:
    try:
        order = get_order(db, order_id)
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    return OrderResponse.model_validate(order)


@router.patch("/{order_id}", response_model=OrderResponse)
def patch_order(
    order_id: int,
    payload: OrderPatch,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_admin: AdminUser = Depends(get_current_admin),
) -> OrderResponse:
    """Edit contact fields or items, change status, or toggle the archive flag."""
    try:
        order, event = update_order(db, order_id, payload, now=datetime.now(timezone.utc))
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    db.commit()
    db.refresh(order)
    _schedule(background_tasks, dispatcher, event)
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_admin: AdminUser = Depends(get_current_admin),
) -> dict[str, bool]:
    """Cancel and archive a pending order."""
    try:
        _, event = cancel_order(db, order_id, now=datetime.now(timezone.utc))
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    db.commit()
    _schedule(background_tasks, dispatcher, event)
    return {"success": True}


@router.post("/{order_id}/restore", response_model=OrderResponse)
def restore_archived_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> OrderResponse:
    try:
        order = restore_order(db, order_id)
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    db.commit()
    db.refresh(order)
    return OrderResponse.model_validate(order)


@router.delete("/{order_id}/permanent")
def delete_order_permanently(
    order_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> dict[str, str | int]:
    """Irreversibly remove an archived order and its items."""
    try:
        audit = permanently_delete_order(db, order_id, now=datetime.now(timezone.utc), actor_id=current_admin.id)
    except OrderServiceError as exc:
        raise _http_error(exc) from exc
    db.commit()
    return {"message": "Order permanently deleted and logged", "audit_id": audit.id}

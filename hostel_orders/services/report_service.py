"""Dashboard metrics and completed-order income reports."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hostel_orders.models.order import ORDER_STATUSES, Order, OrderItem
from hostel_orders.schemas.report import (
    CompletedItemRow,
    CompletedItemsReport,
    DailyOrderCount,
    DailyRevenue,
    DashboardMetrics,
)
from hostel_orders.services.pricing import ZERO, to_money

DASHBOARD_DAYS = 7


def dashboard_metrics(db: Session, today: date) -> DashboardMetrics:
    """Summarize all orders plus daily counts for the last seven days."""
    status_counts: dict[str, int] = {status: 0 for status in ORDER_STATUSES}
    for status, count in db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status)).all():
        status_counts[status] = count

    days: list[date] = [today - timedelta(days=offset) for offset in range(DASHBOARD_DAYS - 1, -1, -1)]
    window_start = datetime.combine(days[0], datetime.min.time())
    orders_per_day: dict[date, int] = defaultdict(int)
    revenue_per_day: dict[date, Decimal] = defaultdict(lambda: ZERO)
    recent = db.execute(select(Order.created_at, Order.status, Order.total).where(Order.created_at >= window_start)).all()
    for created_at, status, total in recent:
        created_day = created_at.date()
        orders_per_day[created_day] += 1
        if status == "COMPLETED":
            revenue_per_day[created_day] += total

    total_revenue = db.scalar(select(func.coalesce(func.sum(Order.total), 0)).where(Order.status == "COMPLETED"))

    return DashboardMetrics(
        total_orders=sum(status_counts.values()),
        status_counts=status_counts,
        total_revenue=to_money(total_revenue or 0),
        daily_orders=[DailyOrderCount(date=day, count=orders_per_day[day]) for day in days],
        daily_revenue=[DailyRevenue(date=day, revenue=to_money(revenue_per_day[day])) for day in days],
    )


def _report_window(date_from: date | None, date_to: date | None) -> tuple[datetime | None, datetime | None]:
    start = datetime.combine(date_from, datetime.min.time()) if date_from else None
    # A bare end date covers the whole day.
    end = datetime.combine(date_to, datetime.max.time()) if date_to else None
    return start, end


def completed_items_report(db: Session, date_from: date | None = None, date_to: date | None = None) -> CompletedItemsReport:
    """Group items of completed orders by name, highest revenue first."""
    start, end = _report_window(date_from, date_to)
    conditions = [Order.status == "COMPLETED"]
    if start is not None:
        conditions.append(Order.created_at >= start)
    if end is not None:
        conditions.append(Order.created_at <= end)

    orders = db.execute(select(Order.id, Order.customer).where(*conditions)).all()
    rows = db.execute(
        select(
            OrderItem.name,
            func.sum(OrderItem.quantity),
            func.sum(OrderItem.line_total),
            func.count(OrderItem.id),
        )
        .join(Order, OrderItem.order_id == Order.id)
        .where(*conditions)
        .group_by(OrderItem.name)
    ).all()

    items = sorted(
        (
            CompletedItemRow(name=name, qty=int(qty or 0), total=to_money(total or 0), times_ordered=int(count))
            for name, qty, total, count in rows
        ),
        key=lambda row: row.total,
        reverse=True,
    )
    return CompletedItemsReport(
        items=items,
        grand_total=to_money(sum((row.total for row in items), ZERO)),
        order_count=len(orders),
        unique_customers=len({customer for _, customer in orders if customer}),
    )

"""Dashboard and income report schemas."""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel


class DailyOrderCount(BaseModel):
    date: dt.date
    count: int


class DailyRevenue(BaseModel):
    date: dt.date
    revenue: Decimal


class DashboardMetrics(BaseModel):
    """Order counts and completed-order revenue for the admin dashboard."""

    total_orders: int
    status_counts: dict[str, int]
    total_revenue: Decimal
    daily_orders: list[DailyOrderCount]
    daily_revenue: list[DailyRevenue]


class CompletedItemRow(BaseModel):
    name: str
    qty: int
    total: Decimal
    times_ordered: int


class CompletedItemsReport(BaseModel):
    """Completed-order sales grouped by item name."""

    items: list[CompletedItemRow]
    grand_total: Decimal
    order_count: int
    unique_customers: int

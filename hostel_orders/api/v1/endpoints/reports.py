"""Admin dashboard and income report endpoints."""

from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from hostel_orders.core.security import get_current_admin
from hostel_orders.db.session import get_db
from hostel_orders.models.admin_user import AdminUser
from hostel_orders.schemas.report import CompletedItemsReport, DashboardMetrics
from hostel_orders.services.report_service import completed_items_report, dashboard_metrics

router: APIRouter = APIRouter()


@router.get("/dashboard/metrics", response_model=DashboardMetrics)
def get_dashboard_metrics(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> DashboardMetrics:
    return dashboard_metrics(db, today=datetime.now(timezone.utc).date())


@router.get("/reports/completed-items", response_model=CompletedItemsReport)
def get_completed_items(
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> CompletedItemsReport:
    """Income report: completed-order items grouped by name."""
    return completed_items_report(db, date_from=date_from, date_to=date_to)

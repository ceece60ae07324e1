"""Dashboard metrics and income report tests."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from hostel_orders.db.base import Base
from hostel_orders.schemas.order import OrderCreate, OrderItemCreate, OrderPatch
from hostel_orders.services import pricing
from hostel_orders.services.order_service import cancel_order, create_order, update_order
from hostel_orders.services.report_service import completed_items_report, dashboard_metrics

NOW = datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)


def _build_session(tmp_path: Path) -> Session:
    engine = create_engine(f"sqlite:///{tmp_path / 'reports.db'}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def _place(db: Session, customer: str, items: list[tuple[str, int, str]], created_at: datetime, order_type: str = "PICKUP") -> int:
    order, _ = create_order(
        db,
        OrderCreate(
            customer=customer,
            order_type=order_type,
            items=[OrderItemCreate(name=name, quantity=qty, unit_price=Decimal(price)) for name, qty, price in items],
        ),
        now=created_at,
    )
    return order.id


def _complete(db: Session, order_id: int) -> None:
    update_order(db, order_id, OrderPatch(status="ACCEPTED"), now=NOW)
    update_order(db, order_id, OrderPatch(status="COMPLETED"), now=NOW)


@pytest.fixture(autouse=True)
def _fixed_fee(monkeypatch) -> None:
    monkeypatch.setattr(pricing, "DELIVERY_FEE", Decimal("15.00"))


def test_completed_items_report_groups_by_name(tmp_path: Path) -> None:
    with _build_session(tmp_path) as db:
        first = _place(db, "Juan", [("Adobo", 2, "50"), ("Rice", 1, "30")], NOW)
        second = _place(db, "Maria", [("Adobo", 1, "50")], NOW)
        third = _place(db, "Juan", [("Iced Tea", 3, "35")], NOW)
        _place(db, "Pedro", [("Adobo", 5, "50")], NOW)
        for order_id in (first, second, third):
            _complete(db, order_id)
        db.commit()

        report = completed_items_report(db)

    assert [row.name for row in report.items] == ["Adobo", "Iced Tea", "Rice"]
    adobo = report.items[0]
    assert (adobo.qty, adobo.total, adobo.times_ordered) == (3, Decimal("150.00"), 2)
    assert report.grand_total == Decimal("285.00")
    assert report.order_count == 3
    assert report.unique_customers == 2


def test_completed_items_report_respects_date_window(tmp_path: Path) -> None:
    last_week = NOW - timedelta(days=7)
    with _build_session(tmp_path) as db:
        old = _place(db, "Juan", [("Adobo", 1, "50")], last_week)
        late_today = _place(db, "Maria", [("Rice", 1, "30")], NOW.replace(hour=23, minute=59))
        for order_id in (old, late_today):
            _complete(db, order_id)
        db.commit()

        today_only = completed_items_report(db, date_from=NOW.date(), date_to=NOW.date())
        until_last_week = completed_items_report(db, date_to=last_week.date())

    assert [row.name for row in today_only.items] == ["Rice"]
    assert [row.name for row in until_last_week.items] == ["Adobo"]


def test_dashboard_metrics_counts_statuses_and_revenue(tmp_path: Path) -> None:
    yesterday = NOW - timedelta(days=1)
    with _build_session(tmp_path) as db:
        completed = _place(db, "Juan", [("Adobo", 2, "50")], yesterday, order_type="DELIVERY")
        accepted = _place(db, "Maria", [("Rice", 1, "30")], NOW)
        cancelled = _place(db, "Pedro", [("Rice", 1, "30")], NOW)
        _place(db, "Ana", [("Rice", 1, "30")], NOW)
        _complete(db, completed)
        update_order(db, accepted, OrderPatch(status="ACCEPTED"), now=NOW)
        cancel_order(db, cancelled, now=NOW)
        db.commit()

        metrics = dashboard_metrics(db, today=NOW.date())

    assert metrics.total_orders == 4
    assert metrics.status_counts == {"PENDING": 1, "ACCEPTED": 1, "COMPLETED": 1, "CANCELLED": 1}
    assert metrics.total_revenue == Decimal("115.00")
    assert len(metrics.daily_orders) == 7
    assert metrics.daily_orders[-1].date == NOW.date()
    assert metrics.daily_orders[-1].count == 3
    assert metrics.daily_orders[-2].count == 1
    assert metrics.daily_revenue[-2].revenue == Decimal("115.00")
    assert metrics.daily_revenue[-1].revenue == Decimal("0.00")

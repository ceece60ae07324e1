"""Database seeding helpers."""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from hostel_orders.core.config import settings
from hostel_orders.models.food import FoodItem
from hostel_orders.services.counter_service import ensure_counters
from hostel_orders.services.food_service import create_food_item

logger = logging.getLogger(__name__)

STARTER_MENU: list[dict[str, str]] = [
    {"name": "Chicken Adobo", "price": "120.00", "category": "Main", "code": "MAIN-01"},
    {"name": "Pork Sinigang", "price": "150.00", "category": "Soup", "code": "SOUP-01"},
    {"name": "Garlic Rice", "price": "30.00", "category": "Sides", "code": "SIDE-01"},
    {"name": "Iced Tea", "price": "35.00", "category": "Drinks", "code": "DRNK-01"},
]


def ensure_seed_data(session: Session) -> None:
    """Create the id counters, plus a starter menu in development when the catalog is empty."""
    ensure_counters(session)
    session.commit()
    if settings.app_env != "dev":
        return
    if session.scalar(select(FoodItem.id).limit(1)) is not None:
        return

    for entry in STARTER_MENU:
        create_food_item(
            session,
            name=entry["name"],
            price=Decimal(entry["price"]),
            category=entry["category"],
            code=entry["code"],
        )
    session.commit()
    logger.info("[BOOTSTRAP] Seeded %s starter food items", len(STARTER_MENU))

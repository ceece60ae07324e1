"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from hostel_orders.models import admin_user as _admin_user  # noqa: E402,F401
from hostel_orders.models import audit_log as _audit_log  # noqa: E402,F401
from hostel_orders.models import counter as _counter  # noqa: E402,F401
from hostel_orders.models import food as _food  # noqa: E402,F401
from hostel_orders.models import order as _order  # noqa: E402,F401

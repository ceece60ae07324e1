"""Application models package."""

from hostel_orders.models.admin_user import AdminUser
from hostel_orders.models.audit_log import AuditLog
from hostel_orders.models.counter import Counter
from hostel_orders.models.food import FoodItem
from hostel_orders.models.order import Order, OrderItem

__all__ = ["AdminUser", "AuditLog", "Counter", "FoodItem", "Order", "OrderItem"]

"""Schema exports."""

from hostel_orders.schemas.auth import AdminCreate, AdminResponse, LoginRequest, ProfileUpdate, TokenResponse
from hostel_orders.schemas.food import FoodItemCreate, FoodItemResponse, FoodItemUpdate
from hostel_orders.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderItemResponse,
    OrderItemUpdate,
    OrderPatch,
    OrderResponse,
)
from hostel_orders.schemas.report import CompletedItemsReport, DashboardMetrics

__all__ = [
    "AdminCreate",
    "AdminResponse",
    "LoginRequest",
    "ProfileUpdate",
    "TokenResponse",
    "FoodItemCreate",
    "FoodItemResponse",
    "FoodItemUpdate",
    "OrderCreate",
    "OrderItemCreate",
    "OrderItemResponse",
    "OrderItemUpdate",
    "OrderPatch",
    "OrderResponse",
    "CompletedItemsReport",
    "DashboardMetrics",
]

"""API v1 router composition."""

from fastapi import APIRouter

from hostel_orders.api.v1.endpoints import auth, food_items, orders, reports

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(food_items.router, prefix="/food-items", tags=["food-items"])
api_router.include_router(reports.router, tags=["reports"])

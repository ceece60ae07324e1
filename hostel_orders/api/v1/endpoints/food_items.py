"""Food catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from hostel_orders.core.security import get_current_admin
from hostel_orders.db.session import get_db
from hostel_orders.models.admin_user import AdminUser
from hostel_orders.schemas.food import FoodItemCreate, FoodItemResponse, FoodItemUpdate
from hostel_orders.services.errors import OrderServiceError
from hostel_orders.services.food_service import (
    create_food_item,
    delete_food_item,
    get_food_item,
    list_food_items,
    update_food_item,
)

router: APIRouter = APIRouter()


@router.get("", response_model=list[FoodItemResponse])
def get_food_items(
    available_only: bool = Query(default=False),
    db: Session = Depends(get_db),
) -> list[FoodItemResponse]:
    """Public menu listing."""
    return [FoodItemResponse.model_validate(item) for item in list_food_items(db, available_only=available_only)]


@router.get("/{food_id}", response_model=FoodItemResponse)
def get_single_food_item(food_id: int, db: Session = Depends(get_db)) -> FoodItemResponse:
    try:
        food_item = get_food_item(db, food_id)
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    return FoodItemResponse.model_validate(food_item)


@router.post("", response_model=FoodItemResponse, status_code=status.HTTP_201_CREATED)
def add_food_item(
    payload: FoodItemCreate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> FoodItemResponse:
    try:
        food_item = create_food_item(db, **payload.model_dump())
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    db.commit()
    db.refresh(food_item)
    return FoodItemResponse.model_validate(food_item)


@router.patch("/{food_id}", response_model=FoodItemResponse)
def edit_food_item(
    food_id: int,
    payload: FoodItemUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> FoodItemResponse:
    try:
        food_item = update_food_item(db, food_id, payload.model_dump(exclude_unset=True))
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    db.commit()
    db.refresh(food_item)
    return FoodItemResponse.model_validate(food_item)


@router.delete("/{food_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_food_item(
    food_id: int,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> None:
    try:
        delete_food_item(db, food_id)
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    db.commit()

"""Food catalog schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class FoodItemCreate(BaseModel):
    """Payload for a new catalog entry."""

    name: str
    price: Decimal
    description: str | None = None
    category: str | None = None
    code: str | None = None
    img: str | None = None
    available: bool = True


class FoodItemUpdate(BaseModel):
    name: str | None = None
    price: Decimal | None = None
    description: str | None = None
    category: str | None = None
    code: str | None = None
    img: str | None = None
    available: bool | None = None


class FoodItemResponse(BaseModel):
    """Serialized catalog entry."""

    id: int
    name: str
    price: Decimal
    description: str | None
    category: str | None
    code: str | None
    img: str | None
    available: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

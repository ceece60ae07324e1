"""Admin authentication and account endpoints (API JWT)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from hostel_orders.core.security import create_access_token, get_current_admin
from hostel_orders.db.session import get_db
from hostel_orders.models.admin_user import AdminUser
from hostel_orders.schemas.auth import AdminCreate, AdminResponse, LoginRequest, ProfileUpdate, TokenResponse
from hostel_orders.services.admin_service import authenticate_admin, list_admins, register_admin, update_profile
from hostel_orders.services.errors import OrderServiceError

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    admin = authenticate_admin(db, payload.username, payload.password)
    if admin is None:
        logger.info("[AUTH] Failed admin login for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    db.commit()
    return TokenResponse(access_token=create_access_token(data={"sub": str(admin.id)}), username=admin.username)


@router.get("/me", response_model=AdminResponse)
def me(current_admin: AdminUser = Depends(get_current_admin)) -> AdminResponse:
    return AdminResponse.model_validate(current_admin)


@router.put("/me", response_model=AdminResponse)
def update_me(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> AdminResponse:
    """Update the signed-in admin's username, email or password."""
    try:
        admin = update_profile(
            db,
            current_admin,
            username=payload.username,
            email=payload.email,
            current_password=payload.current_password,
            new_password=payload.new_password,
        )
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    db.commit()
    db.refresh(admin)
    return AdminResponse.model_validate(admin)


@router.get("/admins", response_model=list[AdminResponse])
def get_admins(
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> list[AdminResponse]:
    return [AdminResponse.model_validate(admin) for admin in list_admins(db)]


@router.post("/admins", response_model=AdminResponse, status_code=status.HTTP_201_CREATED)
def create_admin_account(
    payload: AdminCreate,
    db: Session = Depends(get_db),
    current_admin: AdminUser = Depends(get_current_admin),
) -> AdminResponse:
    try:
        admin = register_admin(db, payload.username, payload.password, email=payload.email)
    except OrderServiceError as exc:
        raise HTTPException(status_code=exc.status_code, detail=str(exc)) from exc
    db.commit()
    db.refresh(admin)
    return AdminResponse.model_validate(admin)

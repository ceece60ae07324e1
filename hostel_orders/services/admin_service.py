"""Admin account operations."""

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from hostel_orders.core.config import settings
from hostel_orders.core.security import get_password_hash, verify_password
from hostel_orders.models.admin_user import AdminUser
from hostel_orders.services.errors import CredentialsError, DuplicateError, ValidationError
from hostel_orders.services.validators import is_valid_email

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH: int = 6


def find_admin(db: Session, identifier: str) -> AdminUser | None:
    """Look an admin up by username or (case-insensitive) email."""
    return db.scalar(
        select(AdminUser)
        .where(or_(AdminUser.username == identifier, AdminUser.email == identifier.lower()))
        .limit(1)
    )


def create_admin(db: Session, username: str, password: str, email: str | None = None) -> AdminUser:
    admin = AdminUser(
        username=username,
        email=email.lower() if email else None,
        password_hash=get_password_hash(password),
    )
    db.add(admin)
    db.flush()
    return admin


def authenticate_admin(db: Session, identifier: str, password: str) -> AdminUser | None:
    admin = find_admin(db, identifier)
    if admin is None or not verify_password(password, admin.password_hash):
        return None
    admin.last_login_at = datetime.now(timezone.utc)
    return admin


def ensure_default_admin(db: Session) -> bool:
    """Create the configured bootstrap admin when ADMIN_USER/ADMIN_PASS are set."""
    if not settings.admin_user or not settings.admin_pass:
        return db.scalar(select(AdminUser.id).limit(1)) is not None

    if find_admin(db, settings.admin_user) is not None:
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    create_admin(db, settings.admin_user, settings.admin_pass)
    db.commit()
    logger.warning("[SECURITY] Bootstrap admin account created: %s", settings.admin_user)
    return True


def list_admins(db: Session) -> list[AdminUser]:
    return list(db.scalars(select(AdminUser).order_by(AdminUser.id)).all())


def _taken(db: Session, column, value: str, exclude_id: int | None = None) -> bool:
    query = select(AdminUser.id).where(column == value)
    if exclude_id is not None:
        query = query.where(AdminUser.id != exclude_id)
    return db.scalar(query.limit(1)) is not None


def _normalized_email(email: str) -> str:
    email = email.strip().lower()
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    return email


def _check_new_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")


def register_admin(db: Session, username: str, password: str, email: str | None = None) -> AdminUser:
    """Create another back-office account with a unique username and email."""
    username = username.strip()
    if not username or not password:
        raise ValidationError("username and password required")
    _check_new_password(password)
    if _taken(db, AdminUser.username, username):
        raise DuplicateError("username already exists")
    normalized_email = _normalized_email(email) if email else None
    if normalized_email and _taken(db, AdminUser.email, normalized_email):
        raise DuplicateError("Email already in use")

    admin = create_admin(db, username, password, email=normalized_email)
    logger.info("[AUTH] Registered admin %s", admin.username)
    return admin


def update_profile(
    db: Session,
    admin: AdminUser,
    *,
    username: str | None = None,
    email: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
) -> AdminUser:
    """Change username, email or password; a password change needs the current one.

    All checks run before the account is touched.
    """
    if new_password:
        if not current_password:
            raise ValidationError("Current password is required to change password")
        if not verify_password(current_password, admin.password_hash):
            raise CredentialsError("Current password is incorrect")
        _check_new_password(new_password)

    new_username = username.strip() if username else None
    if new_username and new_username != admin.username and _taken(db, AdminUser.username, new_username, admin.id):
        raise DuplicateError("Username already taken")

    new_email = _normalized_email(email) if email else None
    if new_email and new_email != admin.email and _taken(db, AdminUser.email, new_email, admin.id):
        raise DuplicateError("Email already in use")

    if new_username:
        admin.username = new_username
    if new_email:
        admin.email = new_email
    if new_password:
        admin.password_hash = get_password_hash(new_password)
    db.flush()
    logger.info("[AUTH] Admin %s updated profile (password changed: %s)", admin.id, bool(new_password))
    return admin

"""Input validation helpers for storefront orders and catalog entries."""

import re
from decimal import Decimal, InvalidOperation

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s\-+()]{10,20}$")
ALNUM_RE = re.compile(r"[a-zA-Z0-9]")


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def is_valid_phone_number(phone: str) -> bool:
    """Accept 10-20 chars of digits, spaces and ``-+()`` with at least ten digits."""
    digits = re.sub(r"\D", "", phone)
    return bool(PHONE_RE.match(phone)) and len(digits) >= 10


def is_valid_address(address: str) -> bool:
    return bool(address) and len(address.strip()) >= 5 and bool(ALNUM_RE.search(address))


def sanitize_string(value: str | None) -> str | None:
    if not value:
        return None
    return value.strip() or None


def validate_order_contact(
    *,
    customer: str | None,
    email: str | None,
    contact_number: str | None,
    address: str | None,
) -> list[str]:
    """Return human-readable problems with the optional contact fields."""
    errors: list[str] = []
    if customer and len(customer.strip()) < 2:
        errors.append("Customer name must be at least 2 characters")
    if email and not is_valid_email(email):
        errors.append("Invalid email format")
    if contact_number and not is_valid_phone_number(contact_number):
        errors.append("Invalid phone number format")
    if address and not is_valid_address(address):
        errors.append("Address must be at least 5 characters")
    return errors


def validate_food_item(*, name: str | None, price: Decimal | str | None, category: str | None = None) -> list[str]:
    errors: list[str] = []
    if not name or len(name.strip()) < 2:
        errors.append("Name must be at least 2 characters")
    try:
        parsed_price = Decimal(str(price)) if price is not None else None
    except InvalidOperation:
        parsed_price = None
    if parsed_price is None or parsed_price <= 0:
        errors.append("Price must be a positive number")
    if category is not None and not category.strip():
        errors.append("Category must not be empty")
    return errors

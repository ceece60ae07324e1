"""Order notification events and best-effort email dispatch."""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from email.message import EmailMessage
from pathlib import Path
from typing import Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from hostel_orders.core.config import settings
from hostel_orders.models.order import Order, format_display_id
from hostel_orders.services.errors import NotificationError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
EVENT_KINDS: tuple[str, ...] = ("ORDER_PLACED", "ORDER_ACCEPTED", "ORDER_COMPLETED", "ORDER_CANCELLED")

SUBJECTS: dict[str, str] = {
    "ORDER_PLACED": "Order Confirmation {display_id} - Thank You!",
    "ORDER_PLACED_PICKUP": "Pickup Confirmation {display_id} - See You Soon!",
    "ORDER_ACCEPTED": "Order {display_id} Accepted - Preparing Your Order!",
    "ORDER_COMPLETED": "Order {display_id} Completed - Thank You!",
    "ORDER_CANCELLED": "Order Cancelled {display_id} - We're Sorry",
}

TEMPLATES: dict[str, str] = {
    "ORDER_PLACED": "order_placed.txt",
    "ORDER_PLACED_PICKUP": "order_placed_pickup.txt",
    "ORDER_ACCEPTED": "order_accepted.txt",
    "ORDER_COMPLETED": "order_completed.txt",
    "ORDER_CANCELLED": "order_cancelled.txt",
}

_environment = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


@dataclass(frozen=True)
class OrderItemSnapshot:
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    notes: str | None = None


@dataclass(frozen=True)
class OrderSnapshot:
    """Copy of the order taken when the event is emitted."""

    order_id: int
    order_type: str
    status: str
    total: Decimal
    customer: str | None = None
    email: str | None = None
    contact_number: str | None = None
    address: str | None = None
    desired_at: datetime | None = None
    items: tuple[OrderItemSnapshot, ...] = field(default_factory=tuple)

    @property
    def display_id(self) -> str:
        return format_display_id(self.order_id)


@dataclass(frozen=True)
class OrderEvent:
    """Notification request emitted by an order state change."""

    kind: str
    snapshot: OrderSnapshot


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str


def snapshot_order(order: Order) -> OrderSnapshot:
    return OrderSnapshot(
        order_id=order.id,
        order_type=order.order_type,
        status=order.status,
        total=order.total,
        customer=order.customer,
        email=order.email,
        contact_number=order.contact_number,
        address=order.address,
        desired_at=order.desired_at,
        items=tuple(
            OrderItemSnapshot(
                name=item.name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
                notes=item.notes,
            )
            for item in order.items
        ),
    )


def build_event(kind: str, order: Order) -> OrderEvent:
    if kind not in EVENT_KINDS:
        raise ValueError(f"Unknown notification kind: {kind}")
    return OrderEvent(kind=kind, snapshot=snapshot_order(order))


def render_email(event: OrderEvent) -> OutgoingEmail:
    """Render subject and plain-text body for an event with a recipient."""
    snapshot = event.snapshot
    if not snapshot.email:
        raise NotificationError(f"Order {snapshot.display_id} has no email address")

    template_key = event.kind
    if event.kind == "ORDER_PLACED" and snapshot.order_type == "PICKUP":
        template_key = "ORDER_PLACED_PICKUP"

    desired_at = snapshot.desired_at
    body = _environment.get_template(TEMPLATES[template_key]).render(
        order=snapshot,
        customer_name=snapshot.customer or "Guest",
        contact_number=snapshot.contact_number or "N/A",
        address=snapshot.address or "N/A",
        pickup_address=settings.pickup_address,
        desired_date=desired_at.strftime("%Y-%m-%d") if desired_at else None,
        desired_time=desired_at.strftime("%H:%M") if desired_at else None,
    )
    subject = SUBJECTS[template_key].format(display_id=snapshot.display_id)
    return OutgoingEmail(to=snapshot.email, subject=subject, body=body)


class EmailSender(Protocol):
    def send(self, message: OutgoingEmail) -> None: ...


class LoggingEmailSender:
    """Sender used when no SMTP host is configured."""

    def send(self, message: OutgoingEmail) -> None:
        logger.info("[NOTIFY] (no SMTP configured) to=%s subject=%s", message.to, message.subject)


class SmtpEmailSender:
    def __init__(
        self,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        sender: str = settings.mail_from,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender

    def send(self, message: OutgoingEmail) -> None:
        email = EmailMessage()
        email["From"] = self.sender
        email["To"] = message.to
        email["Subject"] = message.subject
        email.set_content(message.body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as smtp:
                smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP delivery to {message.to} failed: {exc}") from exc


class NotificationDispatcher:
    """Deliver order events by email without ever failing the caller."""

    def __init__(self, sender: EmailSender) -> None:
        self.sender = sender

    def dispatch(self, event: OrderEvent) -> bool:
        snapshot = event.snapshot
        if not snapshot.email:
            logger.info("[NOTIFY] %s for order %s skipped: no email provided", event.kind, snapshot.display_id)
            return False
        try:
            self.sender.send(render_email(event))
        except Exception:
            logger.exception(
                "[NOTIFY] %s for order %s failed; order state is unaffected",
                event.kind,
                snapshot.display_id,
            )
            return False
        logger.info("[NOTIFY] %s sent for order %s", event.kind, snapshot.display_id)
        return True


def build_default_sender() -> EmailSender:
    if settings.smtp_host:
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
        )
    return LoggingEmailSender()


_dispatcher: NotificationDispatcher | None = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency returning the process-wide dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher(build_default_sender())
    return _dispatcher

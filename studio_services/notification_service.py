"""
Notification service (``studio_services.notification_service``).

Responsibility:
    Composes the client messages that follow workflow transitions and hands
    them to a pluggable ``NotificationSender``.  Also writes the payment
    reminder schedule when an invoice is sent.

Architecture position:
    Services layer.  Delivery (email, push, chat) is outside this repository:
    the default ``LoggingNotificationSender`` records the message as a
    structured log line.

Failure modes:
    - A client without an email address is skipped with a warning; nothing
      is raised.
    - Sender exceptions propagate to the caller.  Inside a workflow side
      effect the engine reports them as a side-effect failure.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Protocol
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from studio_config.schema import ReminderSettings
from studio_kernel.domain.clock import Clock, SystemClock, ensure_utc
from studio_kernel.domain.workflow import entity_attr
from studio_kernel.logging_config import get_logger
from studio_kernel.services.base import BaseService
from studio_modules.invoices.orm import InvoiceModel, PaymentReminderModel
from studio_modules.people.orm import ClientModel

logger = get_logger("services.notification_service")


class NotificationSender(Protocol):
    """Delivery channel for a composed message."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        ...


class LoggingNotificationSender:
    """Sender that records each message as a log line instead of delivering it."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        logger.info(
            "notification_sent",
            extra={"recipient": recipient, "subject": subject, "body_length": len(body)},
        )


def _as_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _format_when(value: Any) -> str:
    if isinstance(value, datetime):
        return ensure_utc(value).strftime("%Y-%m-%d %H:%M UTC")
    return str(value)


class NotificationService(BaseService):
    """Client notifications for bookings, invoices and editing jobs."""

    def __init__(
        self,
        session: Session,
        sender: NotificationSender | None = None,
        clock: Clock | None = None,
        reminders: ReminderSettings | None = None,
        studio_name: str = "PhotoLens Studio",
    ):
        super().__init__(session)
        self._sender = sender or LoggingNotificationSender()
        self._clock = clock or SystemClock()
        self._reminders = reminders or ReminderSettings()
        self._studio_name = studio_name

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _client_email(self, entity: Any) -> str | None:
        client_id = entity_attr(entity, "client_id")
        if client_id is None:
            return None
        return self.session.execute(
            select(ClientModel.email).where(ClientModel.id == _as_uuid(client_id))
        ).scalar_one_or_none()

    def _notify_client(self, entity: Any, subject: str, body: str, event: str) -> bool:
        recipient = self._client_email(entity)
        if not recipient:
            logger.warning(
                "notification_skipped",
                extra={
                    "event": event,
                    "client_id": str(entity_attr(entity, "client_id")),
                    "reason": "client has no email address",
                },
            )
            return False
        self._sender.send(recipient, subject, body)
        logger.info("client_notified", extra={"event": event, "recipient": recipient})
        return True

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    def send_booking_confirmation(self, booking: Any) -> None:
        when = _format_when(entity_attr(booking, "scheduled_at"))
        session_type = entity_attr(booking, "session_type") or "photo session"
        self._notify_client(
            booking,
            f"{self._studio_name}: booking confirmed",
            f"Your {session_type} on {when} is confirmed. "
            "Your invoice will follow shortly.",
            "booking_confirmation",
        )

    def send_booking_cancellation(self, booking: Any) -> None:
        when = _format_when(entity_attr(booking, "scheduled_at"))
        self._notify_client(
            booking,
            f"{self._studio_name}: booking cancelled",
            f"Your session on {when} has been cancelled.",
            "booking_cancellation",
        )

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------

    def send_invoice_email(self, invoice: Any) -> None:
        number = entity_attr(invoice, "invoice_number")
        self._notify_client(
            invoice,
            f"{self._studio_name}: invoice {number}",
            f"Please find invoice {number} for {entity_attr(invoice, 'total')}. "
            f"Payment is due by {entity_attr(invoice, 'due_date')}.",
            "invoice_email",
        )

    def schedule_payment_reminders(self, invoice: Any) -> list[datetime]:
        """Write the reminder schedule for a newly sent invoice.

        Reminders fall every ``frequency_days`` after the send time, ``count``
        of them.  Returns the due times, or an empty list when automated
        reminders are disabled.  An invoice that already has a schedule keeps
        it.
        """
        if not self._reminders.enabled:
            logger.info(
                "payment_reminders_disabled",
                extra={"invoice_id": str(entity_attr(invoice, "id"))},
            )
            return []

        invoice_id = _as_uuid(entity_attr(invoice, "id"))
        existing = self.session.execute(
            select(PaymentReminderModel.due_at)
            .where(PaymentReminderModel.invoice_id == invoice_id)
            .order_by(PaymentReminderModel.sequence)
        ).scalars().all()
        if existing:
            return [ensure_utc(due_at) for due_at in existing]

        sent_at = self._clock.now_utc()
        step = timedelta(days=self._reminders.frequency_days)
        due_times = [sent_at + step * n for n in range(1, self._reminders.count + 1)]

        with self.unit_of_work():
            for sequence, due_at in enumerate(due_times, start=1):
                self.session.add(
                    PaymentReminderModel(
                        id=uuid4(),
                        invoice_id=invoice_id,
                        due_at=due_at,
                        sequence=sequence,
                    )
                )

        logger.info(
            "payment_reminders_scheduled",
            extra={
                "invoice_id": str(invoice_id),
                "reminder_count": len(due_times),
                "first_due_at": due_times[0],
            },
        )
        return due_times

    def send_overdue_reminder(self, invoice: Any) -> None:
        number = entity_attr(invoice, "invoice_number")
        self._notify_client(
            invoice,
            f"{self._studio_name}: invoice {number} is overdue",
            f"Invoice {number} was due on {entity_attr(invoice, 'due_date')} "
            "and still has a balance outstanding.",
            "overdue_reminder",
        )
        with self.unit_of_work():
            self.session.execute(
                update(InvoiceModel)
                .where(InvoiceModel.id == _as_uuid(entity_attr(invoice, "id")))
                .values(last_reminder_sent=self._clock.now_utc())
                .execution_options(synchronize_session="evaluate")
            )

    def send_payment_receipt(self, invoice: Any) -> None:
        number = entity_attr(invoice, "invoice_number")
        self._notify_client(
            invoice,
            f"{self._studio_name}: payment received",
            f"Thank you. Invoice {number} is paid in full.",
            "payment_receipt",
        )

    # ------------------------------------------------------------------
    # Editing jobs
    # ------------------------------------------------------------------

    def notify_client_review(self, job: Any) -> None:
        link = entity_attr(job, "drive_folder_url")
        body = "Your edited photos are ready for review."
        if link:
            body += f" View the gallery: {link}"
        self._notify_client(
            job, f"{self._studio_name}: photos ready for review", body, "client_review"
        )

    def notify_revision_requested(self, job: Any) -> None:
        # Goes to staff, not the client: the editor picks it up from the log.
        logger.info(
            "revision_requested_notice",
            extra={
                "editing_job_id": str(entity_attr(job, "id")),
                "editor_id": str(entity_attr(job, "editor_id")),
            },
        )

    def notify_delivery(self, job: Any) -> None:
        link = entity_attr(job, "drive_folder_url")
        body = "Your final photos have been delivered."
        if link:
            body += f" Download them here: {link}"
        self._notify_client(
            job, f"{self._studio_name}: photos delivered", body, "delivery"
        )

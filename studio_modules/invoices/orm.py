"""
Invoice ORM Models (``studio_modules.invoices.orm``).

SQLAlchemy persistence for invoices and their scheduled payment reminders.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from studio_kernel.db.base import TrackedBase
from studio_modules.invoices.models import Invoice, InvoiceStatus, PaymentReminder


class InvoiceModel(TrackedBase):
    """
    ORM model for invoices.

    Guarantees:
        - invoice_number is unique (uq_invoices_number).
        - booking_id is nullable: manual invoices have no booking.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        UniqueConstraint("invoice_number", name="uq_invoices_number"),
        Index("idx_invoices_booking_id", "booking_id"),
        Index("idx_invoices_status", "status"),
    )

    booking_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("bookings.id"), nullable=True
    )
    client_id: Mapped[UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    invoice_number: Mapped[str] = mapped_column(String(50), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=InvoiceStatus.DRAFT.value
    )
    subtotal: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    tax: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    amount_paid: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_reminder_sent: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self) -> Invoice:
        """Convert ORM model to frozen dataclass."""
        return Invoice(
            id=self.id,
            client_id=self.client_id,
            invoice_number=self.invoice_number,
            issue_date=self.issue_date,
            due_date=self.due_date,
            status=InvoiceStatus(self.status),
            booking_id=self.booking_id,
            subtotal=self.subtotal,
            tax=self.tax,
            total=self.total,
            amount_paid=self.amount_paid,
            notes=self.notes,
            last_reminder_sent=self.last_reminder_sent,
        )


class PaymentReminderModel(TrackedBase):
    """ORM model for scheduled payment reminders."""

    __tablename__ = "payment_reminders"

    __table_args__ = (
        UniqueConstraint("invoice_id", "sequence", name="uq_payment_reminders_invoice_seq"),
        Index("idx_payment_reminders_due_at", "due_at"),
    )

    invoice_id: Mapped[UUID] = mapped_column(ForeignKey("invoices.id"), nullable=False)
    due_at: Mapped[datetime] = mapped_column(nullable=False)
    sequence: Mapped[int] = mapped_column(nullable=False)
    sent_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def to_dto(self) -> PaymentReminder:
        return PaymentReminder(
            id=self.id,
            invoice_id=self.invoice_id,
            due_at=self.due_at,
            sequence=self.sequence,
            sent_at=self.sent_at,
        )

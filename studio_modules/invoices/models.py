"""
Invoice Domain Models (``studio_modules.invoices.models``).

Responsibility
--------------
Invoice status enumeration, the frozen invoice snapshot, and the scheduled
payment reminder record.

Invariants enforced
-------------------
* All models are ``frozen=True``.
* All monetary fields use ``Decimal``.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class InvoiceStatus(str, Enum):
    """Invoice lifecycle states."""
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    OVERDUE = "Overdue"


@dataclass(frozen=True)
class Invoice:
    """A bill for a booked session."""
    id: UUID
    client_id: UUID
    invoice_number: str
    issue_date: date
    due_date: date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    booking_id: UUID | None = None
    subtotal: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    amount_paid: Decimal = Decimal("0")
    notes: str | None = None
    last_reminder_sent: datetime | None = None

    @property
    def balance_due(self) -> Decimal:
        return self.total - self.amount_paid


@dataclass(frozen=True)
class PaymentReminder:
    """A payment reminder scheduled when an invoice is sent."""
    id: UUID
    invoice_id: UUID
    due_at: datetime
    sequence: int
    sent_at: datetime | None = None

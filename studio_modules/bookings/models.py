"""
Booking Domain Models (``studio_modules.bookings.models``).

Responsibility
--------------
The booking status enumeration and the frozen booking snapshot the workflow
engine borrows for one transition call.

Invariants enforced
-------------------
* ``Booking`` is frozen; a transition never mutates the snapshot it is given.
* Money uses ``Decimal`` -- never ``float``.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class BookingStatus(str, Enum):
    """Booking lifecycle states."""
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Booking:
    """A scheduled photo session."""
    id: UUID
    client_id: UUID
    scheduled_at: datetime
    status: BookingStatus = BookingStatus.PENDING
    photographer_id: UUID | None = None
    session_type: str = ""
    price: Decimal = Decimal("0")
    invoice_id: UUID | None = None
    location: str | None = None
    notes: str | None = None

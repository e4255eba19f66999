"""
Booking ORM Model (``studio_modules.bookings.orm``).

Maps the ``Booking`` frozen dataclass to the ``bookings`` table.  The
``(photographer_id, scheduled_at)`` index backs the photographer conflict
check run before a booking is confirmed.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studio_kernel.db.base import TrackedBase
from studio_modules.bookings.models import Booking, BookingStatus


class BookingModel(TrackedBase):
    """
    ORM model for bookings.

    Guarantees:
        - client_id FK to clients.id; photographer_id FK to staff.id.
        - status holds the plain BookingStatus value and defaults to Pending.
    """

    __tablename__ = "bookings"

    __table_args__ = (
        Index("idx_bookings_photographer_date", "photographer_id", "scheduled_at"),
        Index("idx_bookings_status", "status"),
    )

    client_id: Mapped[UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    photographer_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("staff.id"), nullable=True
    )
    session_type: Mapped[str] = mapped_column(String(100), default="")
    scheduled_at: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.PENDING.value
    )
    price: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    invoice_id: Mapped[UUID | None] = mapped_column(nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self) -> Booking:
        """Convert ORM model to frozen dataclass."""
        return Booking(
            id=self.id,
            client_id=self.client_id,
            scheduled_at=self.scheduled_at,
            status=BookingStatus(self.status),
            photographer_id=self.photographer_id,
            session_type=self.session_type,
            price=self.price,
            invoice_id=self.invoice_id,
            location=self.location,
            notes=self.notes,
        )

"""
People ORM Models (``studio_modules.people.orm``).

SQLAlchemy persistence for clients and staff.  Maps the frozen dataclasses
from ``models.py`` to the ``clients`` and ``staff`` tables.
"""

from sqlalchemy import Boolean, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studio_kernel.db.base import TrackedBase
from studio_modules.people.models import Client, StaffMember, StaffRole


class ClientModel(TrackedBase):
    """ORM model for studio clients."""

    __tablename__ = "clients"

    __table_args__ = (
        Index("idx_clients_email", "email"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self) -> Client:
        """Convert ORM model to frozen dataclass."""
        return Client(
            id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            notes=self.notes,
        )


class StaffModel(TrackedBase):
    """ORM model for staff members (photographers, editors, office)."""

    __tablename__ = "staff"

    __table_args__ = (
        Index("idx_staff_role", "role"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def to_dto(self) -> StaffMember:
        return StaffMember(
            id=self.id,
            name=self.name,
            role=StaffRole(self.role),
            email=self.email,
            is_active=self.is_active,
        )

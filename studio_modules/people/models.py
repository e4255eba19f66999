"""
People Domain Models (``studio_modules.people.models``).

Frozen dataclass value objects for the clients the studio photographs and
the staff who shoot, edit and bill.  Pure data, ZERO I/O.
"""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class StaffRole(str, Enum):
    """Staff roles.  Role → capability mapping is consulted by callers."""

    OWNER = "Owner"
    ADMIN = "Admin"
    PHOTOGRAPHER = "Photographer"
    EDITOR = "Editor"
    FINANCE = "Finance"


@dataclass(frozen=True)
class Client:
    """A studio client."""
    id: UUID
    name: str
    email: str | None = None
    phone: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class StaffMember:
    """A photographer, editor or office member."""
    id: UUID
    name: str
    role: StaffRole
    email: str | None = None
    is_active: bool = True

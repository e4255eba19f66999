"""
Editing Domain Models (``studio_modules.editing.models``).

Editing job status enumeration and the frozen editing job snapshot.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class EditingStatus(str, Enum):
    """Editing job lifecycle states."""
    QUEUE = "Queue"
    IN_PROGRESS = "In Progress"
    CLIENT_REVIEW = "Client Review"
    REVISIONS_NEEDED = "Revisions Needed"
    COMPLETED = "Completed"


class EditingPriority(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"


@dataclass(frozen=True)
class EditingJob:
    """Post-production work for a completed booking."""
    id: UUID
    booking_id: UUID
    client_id: UUID
    uploaded_at: datetime
    status: EditingStatus = EditingStatus.QUEUE
    editor_id: UUID | None = None
    priority: EditingPriority = EditingPriority.NORMAL
    revision_count: int = 0
    drive_folder_url: str | None = None
    photographer_notes: str | None = None

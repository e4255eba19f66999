"""
Editing ORM Model (``studio_modules.editing.orm``).

Maps ``EditingJob`` to the ``editing_jobs`` table.  One editing job per
booking (uq_editing_jobs_booking).
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from studio_kernel.db.base import TrackedBase
from studio_modules.editing.models import EditingJob, EditingPriority, EditingStatus


class EditingJobModel(TrackedBase):
    """ORM model for editing jobs."""

    __tablename__ = "editing_jobs"

    __table_args__ = (
        UniqueConstraint("booking_id", name="uq_editing_jobs_booking"),
        Index("idx_editing_jobs_editor_id", "editor_id"),
        Index("idx_editing_jobs_status", "status"),
    )

    booking_id: Mapped[UUID] = mapped_column(ForeignKey("bookings.id"), nullable=False)
    client_id: Mapped[UUID] = mapped_column(ForeignKey("clients.id"), nullable=False)
    editor_id: Mapped[UUID | None] = mapped_column(ForeignKey("staff.id"), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EditingStatus.QUEUE.value
    )
    uploaded_at: Mapped[datetime] = mapped_column(nullable=False)
    priority: Mapped[str] = mapped_column(
        String(10), nullable=False, default=EditingPriority.NORMAL.value
    )
    revision_count: Mapped[int] = mapped_column(default=0)
    drive_folder_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    photographer_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def to_dto(self) -> EditingJob:
        """Convert ORM model to frozen dataclass."""
        return EditingJob(
            id=self.id,
            booking_id=self.booking_id,
            client_id=self.client_id,
            uploaded_at=self.uploaded_at,
            status=EditingStatus(self.status),
            editor_id=self.editor_id,
            priority=EditingPriority(self.priority),
            revision_count=self.revision_count,
            drive_folder_url=self.drive_folder_url,
            photographer_notes=self.photographer_notes,
        )

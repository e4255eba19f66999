"""
Photographer conflict checker (``studio_services.conflict_checker``).

Read-only query backing the "photographer available" guard on booking
confirmation: bookings for the same photographer on the same UTC calendar
day whose status is in the configured blocking set.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, time, timedelta, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from studio_kernel.domain.clock import ensure_utc
from studio_kernel.logging_config import get_logger
from studio_modules.bookings.models import Booking, BookingStatus
from studio_modules.bookings.orm import BookingModel

logger = get_logger("services.conflict_checker")

DEFAULT_BLOCKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)


def day_window(when: datetime) -> tuple[datetime, datetime]:
    """Start (inclusive) and end (exclusive) of the UTC day containing ``when``."""
    start = datetime.combine(ensure_utc(when).date(), time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


class SqlConflictChecker:
    """Finds bookings that clash with a photographer's day."""

    def __init__(
        self,
        session: Session,
        blocking_statuses: Iterable[str] = DEFAULT_BLOCKING_STATUSES,
    ):
        self.session = session
        self._blocking = tuple(blocking_statuses)

    def find_conflicts(
        self,
        photographer_id: UUID | str,
        when: datetime,
        exclude_id: UUID | str | None = None,
    ) -> list[Booking]:
        start, end = day_window(when)
        stmt = (
            select(BookingModel)
            .where(
                BookingModel.photographer_id == photographer_id,
                BookingModel.scheduled_at >= start,
                BookingModel.scheduled_at < end,
                BookingModel.status.in_(self._blocking),
            )
            .order_by(BookingModel.scheduled_at)
        )
        if exclude_id is not None:
            stmt = stmt.where(BookingModel.id != exclude_id)

        conflicts = [row.to_dto() for row in self.session.execute(stmt).scalars()]
        logger.debug(
            "photographer_conflicts_checked",
            extra={
                "photographer_id": str(photographer_id),
                "day": start.date().isoformat(),
                "conflict_count": len(conflicts),
            },
        )
        return conflicts

"""
Document service (``studio_services.document_service``).

Responsibility:
    Creates the records that follow a committed status change: the draft
    invoice for a confirmed booking, the editing job for a completed booking,
    sending a completed booking's draft invoices, and the revision counter of
    an editing job sent back for changes.

Invariants enforced:
    - One invoice and one editing job per booking: the generators return the
      existing record instead of creating a second one.
    - Every write is its own unit of work, outside the engine's status commit.

Failure modes:
    - EntityNotFoundError from ``record_revision_request`` for a missing job.
    - IntegrityError if the referenced client does not exist.
"""

from __future__ import annotations

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from studio_config.schema import WorkflowSettings
from studio_kernel.domain.clock import Clock, SystemClock
from studio_kernel.domain.workflow import EntityKind, entity_attr
from studio_kernel.exceptions import EntityNotFoundError
from studio_kernel.logging_config import get_logger
from studio_kernel.services.base import BaseService
from studio_modules.bookings.orm import BookingModel
from studio_modules.editing.models import EditingJob, EditingPriority, EditingStatus
from studio_modules.editing.orm import EditingJobModel
from studio_modules.invoices.models import Invoice, InvoiceStatus
from studio_modules.invoices.orm import InvoiceModel

logger = get_logger("services.document_service")

CENT = Decimal("0.01")


def _as_uuid(value: Any) -> UUID:
    return value if isinstance(value, UUID) else UUID(str(value))


def _decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def invoice_number_for(invoice_id: UUID, issue_date) -> str:
    """Human-facing invoice number, e.g. ``INV-20240301-1A2B3C4D``."""
    return f"INV-{issue_date:%Y%m%d}-{invoice_id.hex[:8].upper()}"


class DocumentService(BaseService):
    """Generates invoices and editing jobs for bookings."""

    def __init__(
        self,
        session: Session,
        settings: WorkflowSettings | None = None,
        clock: Clock | None = None,
    ):
        super().__init__(session)
        self._settings = settings or WorkflowSettings()
        self._clock = clock or SystemClock()

    def generate_invoice_for_booking(self, booking: Any) -> Invoice:
        """Create the draft invoice for ``booking`` (or return the existing one)."""
        booking_id = _as_uuid(entity_attr(booking, "id"))
        existing = self.session.execute(
            select(InvoiceModel).where(InvoiceModel.booking_id == booking_id)
        ).scalars().first()
        if existing is not None:
            logger.info(
                "invoice_already_exists",
                extra={"booking_id": str(booking_id), "invoice_id": str(existing.id)},
            )
            return existing.to_dto()

        subtotal = _decimal(entity_attr(booking, "price")).quantize(CENT)
        tax = (subtotal * self._settings.tax_rate).quantize(CENT, rounding=ROUND_HALF_UP)
        issue_date = self._clock.today()
        invoice_id = uuid4()

        invoice = InvoiceModel(
            id=invoice_id,
            booking_id=booking_id,
            client_id=_as_uuid(entity_attr(booking, "client_id")),
            invoice_number=invoice_number_for(invoice_id, issue_date),
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=self._settings.payment_terms_days),
            status=InvoiceStatus.DRAFT.value,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            amount_paid=Decimal("0"),
        )

        with self.unit_of_work():
            self.session.add(invoice)
            self.session.flush()
            self.session.execute(
                update(BookingModel)
                .where(BookingModel.id == booking_id)
                .values(invoice_id=invoice_id)
                .execution_options(synchronize_session="evaluate")
            )

        logger.info(
            "invoice_generated",
            extra={
                "booking_id": str(booking_id),
                "invoice_id": str(invoice_id),
                "invoice_number": invoice.invoice_number,
                "total": invoice.total,
            },
        )
        return invoice.to_dto()

    def create_editing_job(self, booking: Any) -> EditingJob:
        """Queue the editing job for ``booking`` (or return the existing one)."""
        booking_id = _as_uuid(entity_attr(booking, "id"))
        existing = self.session.execute(
            select(EditingJobModel).where(EditingJobModel.booking_id == booking_id)
        ).scalars().first()
        if existing is not None:
            return existing.to_dto()

        job = EditingJobModel(
            id=uuid4(),
            booking_id=booking_id,
            client_id=_as_uuid(entity_attr(booking, "client_id")),
            status=EditingStatus.QUEUE.value,
            uploaded_at=self._clock.now_utc(),
            priority=EditingPriority.NORMAL.value,
            revision_count=0,
        )
        with self.unit_of_work():
            self.session.add(job)

        logger.info(
            "editing_job_created",
            extra={"booking_id": str(booking_id), "editing_job_id": str(job.id)},
        )
        return job.to_dto()

    def mark_booking_invoices_sent(self, booking: Any) -> int:
        """Move the booking's draft invoices to Sent.  Returns the count moved."""
        booking_id = _as_uuid(entity_attr(booking, "id"))
        with self.unit_of_work():
            result = self.session.execute(
                update(InvoiceModel)
                .where(
                    InvoiceModel.booking_id == booking_id,
                    InvoiceModel.status == InvoiceStatus.DRAFT.value,
                )
                .values(status=InvoiceStatus.SENT.value)
                .execution_options(synchronize_session="evaluate")
            )
        logger.info(
            "booking_invoices_sent",
            extra={"booking_id": str(booking_id), "invoice_count": result.rowcount},
        )
        return result.rowcount

    def record_revision_request(self, job: Any) -> int:
        """Increment the job's revision counter.  Returns the new count."""
        job_id = _as_uuid(entity_attr(job, "id"))
        with self.unit_of_work():
            result = self.session.execute(
                update(EditingJobModel)
                .where(EditingJobModel.id == job_id)
                .values(revision_count=EditingJobModel.revision_count + 1)
                .execution_options(synchronize_session="evaluate")
            )
            if result.rowcount == 0:
                raise EntityNotFoundError(EntityKind.EDITING.value, str(job_id))
        count = self.session.execute(
            select(EditingJobModel.revision_count).where(EditingJobModel.id == job_id)
        ).scalar_one()
        logger.info(
            "revision_requested",
            extra={"editing_job_id": str(job_id), "revision_count": count},
        )
        return count

"""
Workflow collaborator protocols (``studio_modules.hooks``).

Responsibility
--------------
Declares the collaborators that transition predicates and side effects call
out to, and bundles them into ``WorkflowHooks`` so the transition tables can
be built once at startup with real services or with test doubles.

Architecture position
---------------------
**Modules layer**.  Concrete implementations live in ``studio_services``
(``conflict_checker``, ``document_service``, ``notification_service``);
this module depends only on the kernel.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from studio_kernel.domain.clock import Clock, SystemClock


class ConflictChecker(Protocol):
    """Read-only lookup of bookings that clash with a photographer's slot."""

    def find_conflicts(
        self,
        photographer_id: UUID | str,
        when: datetime,
        exclude_id: UUID | str | None = None,
    ) -> Sequence[Any]:
        ...


class DocumentGenerator(Protocol):
    """Creates the documents and records that follow a status change."""

    def generate_invoice_for_booking(self, booking: Any) -> Any:
        ...

    def create_editing_job(self, booking: Any) -> Any:
        ...

    def mark_booking_invoices_sent(self, booking: Any) -> int:
        ...

    def record_revision_request(self, job: Any) -> int:
        ...


class Notifier(Protocol):
    """Client and staff notifications.  Fire-and-forget from the engine's view."""

    def send_booking_confirmation(self, booking: Any) -> None:
        ...

    def send_booking_cancellation(self, booking: Any) -> None:
        ...

    def send_invoice_email(self, invoice: Any) -> None:
        ...

    def schedule_payment_reminders(self, invoice: Any) -> list[datetime]:
        ...

    def send_overdue_reminder(self, invoice: Any) -> None:
        ...

    def send_payment_receipt(self, invoice: Any) -> None:
        ...

    def notify_client_review(self, job: Any) -> None:
        ...

    def notify_revision_requested(self, job: Any) -> None:
        ...

    def notify_delivery(self, job: Any) -> None:
        ...


@dataclass(frozen=True)
class WorkflowHooks:
    """Collaborators closed over by the transition predicates and effects."""

    conflicts: ConflictChecker
    documents: DocumentGenerator
    notifications: Notifier
    clock: Clock = field(default_factory=SystemClock)

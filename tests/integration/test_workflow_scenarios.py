"""
End-to-end workflow scenarios.

Each test wires the engine with ``build_workflow_engine`` over in-memory
SQLite and drives bookings, invoices and editing jobs through their
lifecycles.  Only the notification sender is replaced so messages can be
inspected.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from studio_modules.bookings.models import BookingStatus
from studio_modules.bookings.orm import BookingModel
from studio_modules.editing.models import EditingStatus
from studio_modules.editing.orm import EditingJobModel
from studio_modules.invoices.models import InvoiceStatus
from studio_modules.invoices.orm import InvoiceModel, PaymentReminderModel
from studio_services.workflow_engine import (
    OUTCOME_SIDE_EFFECT_FAILED,
    OUTCOME_SUCCESS,
    WorkflowEngine,
)
from studio_services.wiring import build_workflow_engine


class RecordingSender:
    def __init__(self):
        self.sent: list[tuple[str, str, str]] = []

    def send(self, recipient, subject, body):
        self.sent.append((recipient, subject, body))

    @property
    def subjects(self) -> list[str]:
        return [subject for _, subject, _ in self.sent]


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def outcomes() -> list[dict]:
    return []


@pytest.fixture
def workflow(session, studio_config, clock, sender, outcomes) -> WorkflowEngine:
    return build_workflow_engine(
        session, studio_config, clock=clock, sender=sender, outcome_sink=outcomes.append
    )


def _count(session, model) -> int:
    return session.execute(select(func.count()).select_from(model)).scalar_one()


def _invoices_for(session, booking_id) -> list[InvoiceModel]:
    session.expire_all()
    return session.execute(
        select(InvoiceModel).where(InvoiceModel.booking_id == booking_id)
    ).scalars().all()


class TestBookingScenarios:

    def test_confirm_free_photographer(self, workflow, session, sender, add_booking, reload):
        booking = add_booking()

        result = workflow.execute_transition("booking", booking, BookingStatus.CONFIRMED)

        assert result.as_dict() == {"success": True}
        stored = reload(BookingModel, booking)
        assert stored.status == BookingStatus.CONFIRMED
        invoices = _invoices_for(session, booking.id)
        assert len(invoices) == 1
        assert invoices[0].status == "Draft"
        assert stored.invoice_id == invoices[0].id
        # 1500.00 plus 10% tax
        assert invoices[0].total == Decimal("1650.00")
        assert sender.subjects == ["Test Studio: booking confirmed"]

    def test_confirm_with_conflicting_booking(self, workflow, session, add_booking, reload):
        add_booking(status=BookingStatus.CONFIRMED)
        booking = add_booking()

        result = workflow.execute_transition("booking", booking, "Confirmed")

        assert result.as_dict() == {
            "success": False,
            "error": "Validation failed for this transition",
        }
        assert reload(BookingModel, booking).status == BookingStatus.PENDING
        assert _count(session, InvoiceModel) == 0

    def test_complete_before_session_date(self, workflow, session, add_booking, reload):
        booking = add_booking(status=BookingStatus.CONFIRMED)

        result = workflow.execute_transition("booking", booking, BookingStatus.COMPLETED)

        assert result.success is False
        assert result.error == "Validation failed for this transition"
        assert result.reason == "Booking date has not passed yet"
        assert reload(BookingModel, booking).status == BookingStatus.CONFIRMED
        assert _count(session, EditingJobModel) == 0

    def test_cancelled_booking_cannot_be_confirmed(self, workflow, sender, add_booking, reload, outcomes):
        booking = add_booking(status=BookingStatus.CANCELLED)

        result = workflow.execute_transition("booking", booking, BookingStatus.CONFIRMED)

        assert result.as_dict() == {
            "success": False,
            "error": "Invalid transition from Cancelled to Confirmed",
        }
        assert reload(BookingModel, booking).status == BookingStatus.CANCELLED
        assert sender.sent == []
        assert outcomes[-1]["outcome"] == "no_transition"

    def test_full_booking_lifecycle(self, workflow, session, clock, add_booking, reload):
        booking = add_booking()

        assert workflow.execute_transition("booking", booking, "Confirmed").success
        booking = reload(BookingModel, booking)

        clock.advance_days(8)
        result = workflow.execute_transition("booking", booking, "Completed")

        assert result.success is True
        assert reload(BookingModel, booking).status == BookingStatus.COMPLETED
        jobs = session.execute(
            select(EditingJobModel).where(EditingJobModel.booking_id == booking.id)
        ).scalars().all()
        assert len(jobs) == 1
        assert jobs[0].status == EditingStatus.QUEUE.value
        assert [i.status for i in _invoices_for(session, booking.id)] == ["Sent"]

    def test_cancel_pending_booking(self, workflow, sender, add_booking, reload):
        booking = add_booking()

        result = workflow.execute_transition("booking", booking, BookingStatus.CANCELLED)

        assert result.success is True
        assert reload(BookingModel, booking).status == BookingStatus.CANCELLED
        assert sender.subjects == ["Test Studio: booking cancelled"]

    def test_stale_snapshot_is_rejected(self, workflow, session, add_booking, reload):
        booking = add_booking()
        assert workflow.execute_transition("booking", booking, "Cancelled").success

        # Second caller still holds the Pending snapshot
        result = workflow.execute_transition("booking", booking, "Confirmed")

        assert result.success is False
        assert result.status_committed is False
        assert reload(BookingModel, booking).status == BookingStatus.CANCELLED
        assert _count(session, InvoiceModel) == 0


class TestInvoiceScenarios:

    def test_send_draft_invoice(self, workflow, session, sender, add_invoice, reload):
        invoice = add_invoice(status=InvoiceStatus.DRAFT)

        result = workflow.execute_transition("invoice", invoice, InvoiceStatus.SENT)

        assert result.as_dict() == {"success": True}
        assert reload(InvoiceModel, invoice).status == InvoiceStatus.SENT
        assert sender.subjects == [f"Test Studio: invoice {invoice.invoice_number}"]
        reminders = session.execute(
            select(PaymentReminderModel).where(PaymentReminderModel.invoice_id == invoice.id)
        ).scalars().all()
        assert len(reminders) == 3

    def test_payment_requires_settled_balance(self, workflow, add_invoice, reload):
        invoice = add_invoice(status=InvoiceStatus.SENT, amount_paid=Decimal("500.00"))

        result = workflow.execute_transition("invoice", invoice, InvoiceStatus.PAID)

        assert result.success is False
        assert result.reason == "Balance of 1000.00 is still outstanding"
        assert reload(InvoiceModel, invoice).status == InvoiceStatus.SENT

    def test_paid_in_full(self, workflow, sender, add_invoice, reload):
        invoice = add_invoice(status=InvoiceStatus.SENT, amount_paid=Decimal("1500.00"))

        assert workflow.execute_transition("invoice", invoice, "Paid").success
        assert reload(InvoiceModel, invoice).status == InvoiceStatus.PAID
        assert sender.subjects == ["Test Studio: payment received"]

    def test_overdue_after_due_date(self, workflow, clock, sender, add_invoice, reload):
        invoice = add_invoice(status=InvoiceStatus.SENT)
        clock.advance_days(20)

        result = workflow.execute_transition("invoice", invoice, InvoiceStatus.OVERDUE)

        assert result.success is True
        stored = reload(InvoiceModel, invoice)
        assert stored.status == InvoiceStatus.OVERDUE
        assert stored.last_reminder_sent is not None
        assert sender.subjects == [f"Test Studio: invoice {invoice.invoice_number} is overdue"]

    def test_overdue_before_due_date(self, workflow, add_invoice, reload):
        invoice = add_invoice(status=InvoiceStatus.SENT)

        result = workflow.execute_transition("invoice", invoice, "Overdue")

        assert result.reason == "Invoice is not due until 2024-03-15"
        assert reload(InvoiceModel, invoice).status == InvoiceStatus.SENT


class TestEditingScenarios:

    def test_review_and_revision_round_trip(self, workflow, sender, add_job, reload):
        job = add_job(drive_folder_url="https://drive.example.com/g/1")

        for target in ("In Progress", "Client Review", "Revisions Needed", "In Progress", "Client Review"):
            result = workflow.execute_transition("editing", job, target)
            assert result.success, (target, result.error)
            job = reload(EditingJobModel, job)

        assert job.status == EditingStatus.CLIENT_REVIEW
        assert job.revision_count == 1
        assert sender.subjects == [
            "Test Studio: photos ready for review",
            "Test Studio: photos ready for review",
        ]

        assert workflow.execute_transition("editing", job, EditingStatus.COMPLETED).success
        assert reload(EditingJobModel, job).status == EditingStatus.COMPLETED
        assert sender.subjects[-1] == "Test Studio: photos delivered"

    def test_queue_cannot_skip_to_review(self, workflow, add_job, reload):
        job = add_job()

        result = workflow.execute_transition("editing", job, EditingStatus.CLIENT_REVIEW)

        assert result.error == "Invalid transition from Queue to Client Review"
        assert reload(EditingJobModel, job).status == EditingStatus.QUEUE


class TestSideEffectFailure:

    def test_status_stays_committed(self, session, studio_config, clock, add_booking, reload, outcomes):
        class BrokenSender:
            def send(self, recipient, subject, body):
                raise ConnectionError("smtp unavailable")

        engine = build_workflow_engine(
            session, studio_config, clock=clock, sender=BrokenSender(), outcome_sink=outcomes.append
        )
        booking = add_booking()

        result = engine.execute_transition("booking", booking, BookingStatus.CANCELLED)

        assert result.success is False
        assert result.error == "smtp unavailable"
        assert result.status_committed is True
        assert result.side_effects_completed is False
        assert reload(BookingModel, booking).status == BookingStatus.CANCELLED
        assert outcomes[-1]["outcome"] == OUTCOME_SIDE_EFFECT_FAILED


class TestWiring:

    def test_engine_over_sql_store(self, workflow, outcomes, add_invoice):
        assert workflow.get_valid_transitions("booking", "Pending") == ["Confirmed", "Cancelled"]
        assert workflow.is_valid_transition("invoice", "Overdue", "Paid") is True

        workflow.execute_transition("invoice", add_invoice(status=InvoiceStatus.DRAFT), "Sent")
        assert outcomes[-1]["outcome"] == OUTCOME_SUCCESS
        assert outcomes[-1]["entity_kind"] == "invoice"

    def test_defaults_to_active_config(self, session, monkeypatch, captured_logs):
        monkeypatch.delenv("STUDIO_CONFIG", raising=False)

        engine = build_workflow_engine(session)

        assert engine.registry.kinds()
        assert any(r["message"] == "workflow_engine_ready" for r in captured_logs())

    def test_conflict_window_uses_configured_statuses(self, session, studio_config, clock, add_booking, reload):
        from dataclasses import replace

        config = replace(
            studio_config,
            workflow=replace(studio_config.workflow, conflict_statuses=("Confirmed",)),
        )
        engine = build_workflow_engine(session, config, clock=clock)
        # A Pending booking on the same day no longer blocks
        add_booking(scheduled_at=clock.now_utc() + timedelta(days=7, hours=2))
        booking = add_booking()

        assert engine.execute_transition("booking", booking, "Confirmed").success
        assert reload(BookingModel, booking).status == BookingStatus.CONFIRMED

"""
Pytest fixtures for the studio workflow test suite.

Provides:
- Structured logging capture
- A deterministic clock
- Recording fakes for the workflow collaborators (conflict checker,
  document generator, notifier) and an in-memory compare-and-swap store
- An in-memory SQLite database with every studio table, one per test
- Row builders for clients, staff, bookings, invoices and editing jobs
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO
from typing import Any
from uuid import UUID, uuid4

import pytest

from studio_config.schema import ReminderSettings, StudioConfig, WorkflowSettings
from studio_kernel.db.engine import (
    create_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from studio_kernel.domain.clock import DeterministicClock
from studio_kernel.domain.workflow import entity_attr, kind_value, status_value
from studio_kernel.exceptions import EntityNotFoundError, StaleStatusError
from studio_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from studio_modules.bookings.models import Booking, BookingStatus
from studio_modules.bookings.orm import BookingModel
from studio_modules.editing.models import EditingJob, EditingStatus
from studio_modules.editing.orm import EditingJobModel
from studio_modules.hooks import WorkflowHooks
from studio_modules.invoices.models import Invoice, InvoiceStatus
from studio_modules.invoices.orm import InvoiceModel
from studio_modules.people.models import StaffRole
from studio_modules.people.orm import ClientModel, StaffModel
from studio_modules.registry import build_transition_registry
from studio_services.workflow_engine import WorkflowEngine

# Fixed "now" for every clock-dependent test: 2024-03-01 09:00 UTC
TEST_NOW = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture studio_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, engine):
            engine.execute_transition(...)
            logs = captured_logs()
            assert any(r["message"] == "workflow_transition" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("studio_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(TEST_NOW)


# =============================================================================
# Recording fakes
# =============================================================================


class RecordingConflictChecker:
    """Returns a preset conflict list and records each query."""

    def __init__(self, conflicts: list | None = None):
        self.conflicts = list(conflicts or [])
        self.calls: list[tuple[Any, datetime, Any]] = []

    def find_conflicts(self, photographer_id, when, exclude_id=None):
        self.calls.append((photographer_id, when, exclude_id))
        return list(self.conflicts)


class _Recorder:
    """Records ``(method, entity)`` for every call; methods listed in
    ``failing`` raise ``RuntimeError`` instead."""

    def __init__(self):
        self.calls: list[tuple[str, Any]] = []
        self.failing: dict[str, str] = {}

    def _record(self, method: str, entity: Any) -> None:
        self.calls.append((method, entity))
        if method in self.failing:
            raise RuntimeError(self.failing[method])

    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]


class RecordingDocuments(_Recorder):
    def generate_invoice_for_booking(self, booking):
        self._record("generate_invoice_for_booking", booking)

    def create_editing_job(self, booking):
        self._record("create_editing_job", booking)

    def mark_booking_invoices_sent(self, booking):
        self._record("mark_booking_invoices_sent", booking)
        return 1

    def record_revision_request(self, job):
        self._record("record_revision_request", job)
        return 1


class RecordingNotifier(_Recorder):
    def send_booking_confirmation(self, booking):
        self._record("send_booking_confirmation", booking)

    def send_booking_cancellation(self, booking):
        self._record("send_booking_cancellation", booking)

    def send_invoice_email(self, invoice):
        self._record("send_invoice_email", invoice)

    def schedule_payment_reminders(self, invoice):
        self._record("schedule_payment_reminders", invoice)
        return []

    def send_overdue_reminder(self, invoice):
        self._record("send_overdue_reminder", invoice)

    def send_payment_receipt(self, invoice):
        self._record("send_payment_receipt", invoice)

    def notify_client_review(self, job):
        self._record("notify_client_review", job)

    def notify_revision_requested(self, job):
        self._record("notify_revision_requested", job)

    def notify_delivery(self, job):
        self._record("notify_delivery", job)


class InMemoryStatusStore:
    """Dict-backed ``StatusStore`` with the same compare-and-swap contract
    as ``SqlStatusStore``.  Seed rows with ``put``."""

    def __init__(self):
        self.rows: dict[tuple[str, str], str] = {}
        self.writes: list[tuple[str, str, str]] = []
        self.fail_with: Exception | None = None

    def put(self, entity_kind, entity_id, status) -> None:
        self.rows[(kind_value(entity_kind), str(entity_id))] = status_value(status)

    def get_status(self, entity_kind, entity_id) -> str:
        key = (kind_value(entity_kind), str(entity_id))
        if key not in self.rows:
            raise EntityNotFoundError(key[0], key[1])
        return self.rows[key]

    def update_status(self, entity_kind, entity_id, new_status, expected_status) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        key = (kind_value(entity_kind), str(entity_id))
        if key not in self.rows:
            raise EntityNotFoundError(key[0], key[1])
        if self.rows[key] != expected_status:
            raise StaleStatusError(key[0], key[1], expected_status)
        self.rows[key] = new_status
        self.writes.append((key[0], key[1], new_status))


@dataclass
class FakeCollaborators:
    """Everything an in-memory engine is built from, for assertions."""

    conflicts: RecordingConflictChecker
    documents: RecordingDocuments
    notifications: RecordingNotifier
    store: InMemoryStatusStore
    clock: DeterministicClock
    outcomes: list[dict] = field(default_factory=list)

    def hooks(self) -> WorkflowHooks:
        return WorkflowHooks(
            conflicts=self.conflicts,
            documents=self.documents,
            notifications=self.notifications,
            clock=self.clock,
        )


@pytest.fixture
def fakes(clock) -> FakeCollaborators:
    return FakeCollaborators(
        conflicts=RecordingConflictChecker(),
        documents=RecordingDocuments(),
        notifications=RecordingNotifier(),
        store=InMemoryStatusStore(),
        clock=clock,
    )


@pytest.fixture
def registry(fakes):
    return build_transition_registry(fakes.hooks())


@pytest.fixture
def engine(registry, fakes) -> WorkflowEngine:
    """Engine over the production transition tables and recording fakes."""
    return WorkflowEngine(registry, fakes.store, outcome_sink=fakes.outcomes.append)


# =============================================================================
# Entity snapshots (no database)
# =============================================================================


@pytest.fixture
def make_booking(fakes):
    """Build a ``Booking`` snapshot and seed its status in the fake store."""

    def _make(status=BookingStatus.PENDING, scheduled_at=None, **overrides) -> Booking:
        booking = Booking(
            id=overrides.pop("id", uuid4()),
            client_id=overrides.pop("client_id", uuid4()),
            scheduled_at=scheduled_at or TEST_NOW + timedelta(days=7),
            status=status,
            photographer_id=overrides.pop("photographer_id", uuid4()),
            price=overrides.pop("price", Decimal("1500.00")),
            **overrides,
        )
        fakes.store.put("booking", booking.id, status)
        return booking

    return _make


@pytest.fixture
def make_invoice(fakes):
    def _make(status=InvoiceStatus.DRAFT, **overrides) -> Invoice:
        invoice = Invoice(
            id=overrides.pop("id", uuid4()),
            client_id=overrides.pop("client_id", uuid4()),
            invoice_number=overrides.pop("invoice_number", "INV-20240301-TEST0001"),
            issue_date=overrides.pop("issue_date", date(2024, 3, 1)),
            due_date=overrides.pop("due_date", date(2024, 3, 15)),
            status=status,
            total=overrides.pop("total", Decimal("1500.00")),
            **overrides,
        )
        fakes.store.put("invoice", invoice.id, status)
        return invoice

    return _make


@pytest.fixture
def make_job(fakes):
    def _make(status=EditingStatus.QUEUE, **overrides) -> EditingJob:
        job = EditingJob(
            id=overrides.pop("id", uuid4()),
            booking_id=overrides.pop("booking_id", uuid4()),
            client_id=overrides.pop("client_id", uuid4()),
            uploaded_at=overrides.pop("uploaded_at", TEST_NOW),
            status=status,
            **overrides,
        )
        fakes.store.put("editing", job.id, status)
        return job

    return _make


# =============================================================================
# Database (in-memory SQLite, fresh per test)
# =============================================================================


@pytest.fixture
def session():
    """Session on a fresh in-memory SQLite database with all tables created."""
    init_engine_from_url("sqlite://")
    create_tables()
    db_session = get_session()
    yield db_session
    db_session.close()
    reset_engine()


@pytest.fixture
def studio_config() -> StudioConfig:
    return StudioConfig(
        studio_name="Test Studio",
        database_url="sqlite://",
        workflow=WorkflowSettings(
            payment_terms_days=14,
            tax_rate=Decimal("0.10"),
            reminders=ReminderSettings(enabled=True, frequency_days=7, count=3),
        ),
    )


@pytest.fixture
def client_row(session) -> ClientModel:
    client = ClientModel(id=uuid4(), name="Ayu Lestari", email="ayu@example.com")
    session.add(client)
    session.commit()
    return client


@pytest.fixture
def photographer_row(session) -> StaffModel:
    staff = StaffModel(
        id=uuid4(),
        name="Budi Santoso",
        role=StaffRole.PHOTOGRAPHER.value,
        email="budi@example.com",
    )
    session.add(staff)
    session.commit()
    return staff


@pytest.fixture
def add_booking(session, client_row, photographer_row):
    """Insert a booking row and return its DTO."""

    def _add(
        status=BookingStatus.PENDING,
        scheduled_at: datetime | None = None,
        photographer_id: UUID | None | str = "default",
        price: Decimal = Decimal("1500.00"),
    ) -> Booking:
        row = BookingModel(
            id=uuid4(),
            client_id=client_row.id,
            photographer_id=(
                photographer_row.id if photographer_id == "default" else photographer_id
            ),
            session_type="Wedding",
            scheduled_at=scheduled_at or TEST_NOW + timedelta(days=7),
            status=status_value(status),
            price=price,
        )
        session.add(row)
        session.commit()
        return row.to_dto()

    return _add


@pytest.fixture
def add_invoice(session, client_row):
    def _add(
        status=InvoiceStatus.SENT,
        total: Decimal = Decimal("1500.00"),
        amount_paid: Decimal = Decimal("0"),
        due_date: date = date(2024, 3, 15),
        booking_id: UUID | None = None,
    ) -> Invoice:
        invoice_id = uuid4()
        row = InvoiceModel(
            id=invoice_id,
            booking_id=booking_id,
            client_id=client_row.id,
            invoice_number=f"INV-TEST-{invoice_id.hex[:8].upper()}",
            issue_date=date(2024, 3, 1),
            due_date=due_date,
            status=status_value(status),
            subtotal=total,
            tax=Decimal("0"),
            total=total,
            amount_paid=amount_paid,
        )
        session.add(row)
        session.commit()
        return row.to_dto()

    return _add


@pytest.fixture
def add_job(session, add_booking):
    def _add(status=EditingStatus.QUEUE, drive_folder_url: str | None = None) -> EditingJob:
        booking = add_booking(status=BookingStatus.COMPLETED)
        row = EditingJobModel(
            id=uuid4(),
            booking_id=booking.id,
            client_id=booking.client_id,
            status=status_value(status),
            uploaded_at=TEST_NOW,
            revision_count=0,
            drive_folder_url=drive_folder_url,
        )
        session.add(row)
        session.commit()
        return row.to_dto()

    return _add


@pytest.fixture
def reload(session):
    """Fresh DTO for an entity read back from the database."""

    def _reload(model, entity) -> Any:
        session.expire_all()
        return session.get(model, entity_attr(entity, "id")).to_dto()

    return _reload

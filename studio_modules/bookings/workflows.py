"""
Booking Workflow.

State machine for session bookings:

    Pending ──confirm──> Confirmed ──complete──> Completed
       │                     │
       └──────cancel─────────┴──────> Cancelled

Confirming requires the photographer to be free that day and generates the
draft invoice.  Completing requires the session date to have passed, opens
the editing job and sends the booking's invoices.
"""

from studio_kernel.domain.clock import Clock, ensure_utc
from studio_kernel.domain.workflow import (
    Predicate,
    SideEffect,
    Transition,
    ValidationOutcome,
    entity_attr,
)
from studio_modules.bookings.models import BookingStatus
from studio_modules.hooks import ConflictChecker, WorkflowHooks


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------


def photographer_available(conflicts: ConflictChecker) -> Predicate:
    """Booking's photographer has no other pending/confirmed session that day."""

    def _validate(booking) -> ValidationOutcome:
        photographer_id = entity_attr(booking, "photographer_id")
        when = entity_attr(booking, "scheduled_at")
        if when is None:
            return ValidationOutcome.declined("Booking has no scheduled date")
        if photographer_id is None:
            return ValidationOutcome.ok()
        clashes = conflicts.find_conflicts(
            photographer_id, when, exclude_id=entity_attr(booking, "id")
        )
        if clashes:
            return ValidationOutcome.declined(
                f"Photographer has {len(clashes)} conflicting booking(s) "
                f"on {ensure_utc(when).date().isoformat()}"
            )
        return ValidationOutcome.ok()

    return _validate


def booking_date_passed(clock: Clock) -> Predicate:
    """The session date is in the past."""

    def _validate(booking) -> ValidationOutcome:
        when = entity_attr(booking, "scheduled_at")
        if when is None:
            return ValidationOutcome.declined("Booking has no scheduled date")
        if clock.now_utc() > ensure_utc(when):
            return ValidationOutcome.ok()
        return ValidationOutcome.declined("Booking date has not passed yet")

    return _validate


# -----------------------------------------------------------------------------
# Side effects
# -----------------------------------------------------------------------------


def _on_confirmed(hooks: WorkflowHooks) -> SideEffect:
    def _effect(booking) -> None:
        hooks.documents.generate_invoice_for_booking(booking)
        hooks.notifications.send_booking_confirmation(booking)

    return _effect


def _on_completed(hooks: WorkflowHooks) -> SideEffect:
    def _effect(booking) -> None:
        hooks.documents.create_editing_job(booking)
        hooks.documents.mark_booking_invoices_sent(booking)

    return _effect


def _on_cancelled(hooks: WorkflowHooks) -> SideEffect:
    def _effect(booking) -> None:
        hooks.notifications.send_booking_cancellation(booking)

    return _effect


# -----------------------------------------------------------------------------
# Transition table
# -----------------------------------------------------------------------------


def booking_transitions(hooks: WorkflowHooks) -> tuple[Transition, ...]:
    """Ordered booking transitions bound to ``hooks``."""
    return (
        Transition(
            frozenset({BookingStatus.PENDING}),
            BookingStatus.CONFIRMED,
            name="confirm",
            validate=photographer_available(hooks.conflicts),
            effect=_on_confirmed(hooks),
        ),
        Transition(
            frozenset({BookingStatus.CONFIRMED}),
            BookingStatus.COMPLETED,
            name="complete",
            validate=booking_date_passed(hooks.clock),
            effect=_on_completed(hooks),
        ),
        Transition(
            frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
            BookingStatus.CANCELLED,
            name="cancel",
            effect=_on_cancelled(hooks),
        ),
    )

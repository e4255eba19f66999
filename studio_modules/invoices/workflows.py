"""
Invoice Workflow.

State machine for client invoices:

    Draft ──send──> Sent ──record_payment──> Paid
                     │                        ^
                     └──mark_overdue──> Overdue

Sending emails the invoice and schedules payment reminders.  An invoice
becomes Overdue only once its due date has passed with a balance left, and
Paid only once the balance is settled.
"""

from decimal import Decimal

from studio_kernel.domain.clock import Clock
from studio_kernel.domain.workflow import (
    Predicate,
    SideEffect,
    Transition,
    ValidationOutcome,
    entity_attr,
)
from studio_modules.hooks import WorkflowHooks
from studio_modules.invoices.models import InvoiceStatus


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _balance_due(invoice) -> Decimal:
    return _decimal(entity_attr(invoice, "total")) - _decimal(entity_attr(invoice, "amount_paid"))


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------


def fully_paid(invoice) -> ValidationOutcome:
    """Amount paid covers the invoice total."""
    balance = _balance_due(invoice)
    if balance <= 0:
        return ValidationOutcome.ok()
    return ValidationOutcome.declined(f"Balance of {balance} is still outstanding")


def payment_overdue(clock: Clock) -> Predicate:
    """Due date has passed and a balance remains."""

    def _validate(invoice) -> ValidationOutcome:
        due_date = entity_attr(invoice, "due_date")
        if due_date is None:
            return ValidationOutcome.declined("Invoice has no due date")
        if clock.today() <= due_date:
            return ValidationOutcome.declined(f"Invoice is not due until {due_date.isoformat()}")
        if _balance_due(invoice) <= 0:
            return ValidationOutcome.declined("Invoice has no outstanding balance")
        return ValidationOutcome.ok()

    return _validate


# -----------------------------------------------------------------------------
# Side effects
# -----------------------------------------------------------------------------


def _on_sent(hooks: WorkflowHooks) -> SideEffect:
    def _effect(invoice) -> None:
        hooks.notifications.send_invoice_email(invoice)
        hooks.notifications.schedule_payment_reminders(invoice)

    return _effect


def _on_overdue(hooks: WorkflowHooks) -> SideEffect:
    def _effect(invoice) -> None:
        hooks.notifications.send_overdue_reminder(invoice)

    return _effect


def _on_paid(hooks: WorkflowHooks) -> SideEffect:
    def _effect(invoice) -> None:
        hooks.notifications.send_payment_receipt(invoice)

    return _effect


# -----------------------------------------------------------------------------
# Transition table
# -----------------------------------------------------------------------------


def invoice_transitions(hooks: WorkflowHooks) -> tuple[Transition, ...]:
    """Ordered invoice transitions bound to ``hooks``."""
    return (
        Transition(
            frozenset({InvoiceStatus.DRAFT}),
            InvoiceStatus.SENT,
            name="send",
            effect=_on_sent(hooks),
        ),
        Transition(
            frozenset({InvoiceStatus.SENT, InvoiceStatus.OVERDUE}),
            InvoiceStatus.PAID,
            name="record_payment",
            validate=fully_paid,
            effect=_on_paid(hooks),
        ),
        Transition(
            frozenset({InvoiceStatus.SENT}),
            InvoiceStatus.OVERDUE,
            name="mark_overdue",
            validate=payment_overdue(hooks.clock),
            effect=_on_overdue(hooks),
        ),
    )

"""
Studio transition registry (``studio_modules.registry``).

Responsibility
--------------
Assembles the booking, invoice and editing transition tables into the single
immutable ``TransitionRegistry`` the workflow engine runs on, and exposes the
status enumeration of each entity kind.

The registry is built once at process start (see
``studio_services.wiring.build_workflow_engine``) and passed to the engine;
there is no module-level singleton.
"""

from __future__ import annotations

from enum import Enum

from studio_kernel.domain.workflow import EntityKind, TransitionRegistry, kind_value
from studio_kernel.exceptions import UnknownEntityKindError, UnknownStatusError
from studio_kernel.logging_config import get_logger
from studio_modules.bookings.models import BookingStatus
from studio_modules.bookings.workflows import booking_transitions
from studio_modules.editing.models import EditingStatus
from studio_modules.editing.workflows import editing_transitions
from studio_modules.hooks import WorkflowHooks
from studio_modules.invoices.models import InvoiceStatus
from studio_modules.invoices.workflows import invoice_transitions

logger = get_logger("modules.registry")

STATUS_ENUMS: dict[str, type[Enum]] = {
    EntityKind.BOOKING.value: BookingStatus,
    EntityKind.INVOICE.value: InvoiceStatus,
    EntityKind.EDITING.value: EditingStatus,
}


def statuses_for(entity_kind: EntityKind | str) -> tuple[str, ...]:
    """All status values of a kind, in lifecycle order."""
    enum_cls = STATUS_ENUMS.get(kind_value(entity_kind))
    if enum_cls is None:
        raise UnknownEntityKindError(kind_value(entity_kind))
    return tuple(member.value for member in enum_cls)


def parse_status(entity_kind: EntityKind | str, value: str) -> Enum:
    """Resolve a status literal within its kind's enumeration."""
    kind = kind_value(entity_kind)
    enum_cls = STATUS_ENUMS.get(kind)
    if enum_cls is None:
        raise UnknownEntityKindError(kind)
    try:
        return enum_cls(value)
    except ValueError:
        raise UnknownStatusError(kind, value) from None


def build_transition_registry(hooks: WorkflowHooks) -> TransitionRegistry:
    """Build the studio's transition registry with every hook bound."""
    registry = TransitionRegistry(
        {
            EntityKind.BOOKING: booking_transitions(hooks),
            EntityKind.INVOICE: invoice_transitions(hooks),
            EntityKind.EDITING: editing_transitions(hooks),
        }
    )

    for kind in registry.kinds():
        logger.info(
            "workflow_registered",
            extra={
                "workflow_kind": kind,
                "transition_count": len(registry.transitions_for(kind)),
                "transitions": [t.name for t in registry.transitions_for(kind)],
            },
        )

    for kind, source, target in registry.ambiguous_edges():
        logger.warning(
            "workflow_ambiguous_edge",
            extra={"workflow_kind": kind, "from_status": source, "to_status": target},
        )

    return registry

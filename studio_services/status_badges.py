"""
studio_services.status_badges -- Status presentation for entity lists.

Maps a (kind, status) pair to the tone, icon and CSS classes the studio UI
renders.  Unknown kinds and statuses fall back to the neutral slate tone and
the ``●`` icon.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from studio_kernel.domain.workflow import EntityKind, kind_value, status_value
from studio_modules.bookings.models import BookingStatus
from studio_modules.editing.models import EditingStatus
from studio_modules.invoices.models import InvoiceStatus

NEUTRAL_TONE = "slate"
NEUTRAL_ICON = "●"

_BASE_CLASSES = "inline-flex items-center gap-1 font-medium rounded-lg border"

# (tone, icon) per status value, grouped by kind
_STYLES: dict[str, dict[str, tuple[str, str]]] = {
    EntityKind.BOOKING.value: {
        BookingStatus.PENDING.value: ("yellow", "⏳"),
        BookingStatus.CONFIRMED.value: ("blue", "✓"),
        BookingStatus.COMPLETED.value: ("green", "🎯"),
        BookingStatus.CANCELLED.value: ("red", "❌"),
    },
    EntityKind.INVOICE.value: {
        InvoiceStatus.DRAFT.value: ("slate", "📝"),
        InvoiceStatus.SENT.value: ("blue", "📧"),
        InvoiceStatus.PAID.value: ("green", "💰"),
        InvoiceStatus.OVERDUE.value: ("red", "⚠️"),
    },
    EntityKind.EDITING.value: {
        EditingStatus.QUEUE.value: ("yellow", "📋"),
        EditingStatus.IN_PROGRESS.value: ("blue", "✏️"),
        EditingStatus.CLIENT_REVIEW.value: ("purple", "👀"),
        EditingStatus.REVISIONS_NEEDED.value: ("orange", "🔄"),
        EditingStatus.COMPLETED.value: ("green", "✨"),
    },
}

SIZE_CLASSES = {
    "sm": "text-xs px-2 py-1",
    "md": "text-xs px-3 py-1.5",
    "lg": "text-sm px-4 py-2",
}


@dataclass(frozen=True)
class StatusBadge:
    label: str
    tone: str
    icon: str
    css_classes: str
    title: str


def tone_classes(tone: str) -> str:
    return f"bg-{tone}-500/20 text-{tone}-300 border-{tone}-500/30"


def status_badge(entity_kind: EntityKind | str, status: Any, size: str = "md") -> StatusBadge:
    """Badge for ``status`` of ``entity_kind``.  Unknown sizes render as ``md``."""
    kind = kind_value(entity_kind)
    label = status_value(status) or ""
    tone, icon = _STYLES.get(kind, {}).get(label, (NEUTRAL_TONE, NEUTRAL_ICON))
    size_classes = SIZE_CLASSES.get(size, SIZE_CLASSES["md"])
    return StatusBadge(
        label=label,
        tone=tone,
        icon=icon,
        css_classes=f"{_BASE_CLASSES} {tone_classes(tone)} {size_classes}",
        title=f"{kind} status: {label}",
    )

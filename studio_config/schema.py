"""
Configuration schema (``studio_config.schema``).

Frozen dataclasses describing the studio configuration.  Defaults mirror
``defaults.yaml`` so a partially specified file still yields a complete,
valid configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class ReminderSettings:
    """Automated payment reminders scheduled when an invoice is sent."""

    enabled: bool = True
    frequency_days: int = 7
    count: int = 3


@dataclass(frozen=True)
class WorkflowSettings:
    """Values read by the workflow guards and side effects."""

    conflict_statuses: tuple[str, ...] = ("Pending", "Confirmed")
    payment_terms_days: int = 14
    tax_rate: Decimal = Decimal("0")
    reminders: ReminderSettings = field(default_factory=ReminderSettings)


@dataclass(frozen=True)
class StudioConfig:
    """Complete runtime configuration."""

    studio_name: str = "PhotoLens Studio"
    database_url: str = "sqlite:///studio.db"
    workflow: WorkflowSettings = field(default_factory=WorkflowSettings)

"""
Configuration Loader (``studio_config.loader``).

Responsibility
--------------
Loads a YAML configuration file and parses it into the typed
``studio_config.schema`` dataclasses.  Callers obtain configuration through
``studio_config.get_active_config()``.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Invalid values  -> ``ConfigError`` naming the offending field.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from studio_config.schema import ReminderSettings, StudioConfig, WorkflowSettings
from studio_kernel.exceptions import ConfigError

_KNOWN_BOOKING_STATUSES = frozenset({"Pending", "Confirmed", "Completed", "Cancelled"})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError("<root>", f"expected a mapping, got {type(data).__name__}")
    return data


def _mapping(value: Any, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(field_name, f"expected a mapping, got {type(value).__name__}")
    return value


def _positive_int(data: dict[str, Any], key: str, default: int, field_name: str) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(field_name, f"expected an integer, got {value!r}")
    if value <= 0:
        raise ConfigError(field_name, "must be positive")
    return value


def parse_reminders(data: dict[str, Any]) -> ReminderSettings:
    """Parse the ``workflow.reminders`` block."""
    defaults = ReminderSettings()
    enabled = data.get("enabled", defaults.enabled)
    if not isinstance(enabled, bool):
        raise ConfigError("workflow.reminders.enabled", f"expected true/false, got {enabled!r}")
    return ReminderSettings(
        enabled=enabled,
        frequency_days=_positive_int(
            data, "frequency_days", defaults.frequency_days, "workflow.reminders.frequency_days"
        ),
        count=_positive_int(data, "count", defaults.count, "workflow.reminders.count"),
    )


def parse_workflow(data: dict[str, Any]) -> WorkflowSettings:
    """Parse the ``workflow`` block."""
    defaults = WorkflowSettings()

    statuses = data.get("conflict_statuses", list(defaults.conflict_statuses))
    if not isinstance(statuses, list) or not statuses:
        raise ConfigError("workflow.conflict_statuses", "expected a non-empty list")
    unknown = [s for s in statuses if s not in _KNOWN_BOOKING_STATUSES]
    if unknown:
        raise ConfigError("workflow.conflict_statuses", f"unknown booking statuses {unknown}")

    raw_rate = data.get("tax_rate", defaults.tax_rate)
    try:
        tax_rate = Decimal(str(raw_rate))
    except InvalidOperation:
        raise ConfigError("workflow.tax_rate", f"not a number: {raw_rate!r}") from None
    if not tax_rate.is_finite():
        raise ConfigError("workflow.tax_rate", f"not a finite number: {raw_rate!r}")
    if tax_rate < 0 or tax_rate >= 1:
        raise ConfigError("workflow.tax_rate", "must be a fraction in [0, 1)")

    return WorkflowSettings(
        conflict_statuses=tuple(statuses),
        payment_terms_days=_positive_int(
            data, "payment_terms_days", defaults.payment_terms_days, "workflow.payment_terms_days"
        ),
        tax_rate=tax_rate,
        reminders=parse_reminders(_mapping(data.get("reminders"), "workflow.reminders")),
    )


def parse_config(data: dict[str, Any]) -> StudioConfig:
    """Parse a full configuration document."""
    defaults = StudioConfig()
    database_url = data.get("database_url", defaults.database_url)
    if not isinstance(database_url, str) or not database_url.strip():
        raise ConfigError("database_url", "must be a non-empty string")
    return StudioConfig(
        studio_name=str(data.get("studio_name", defaults.studio_name)),
        database_url=database_url,
        workflow=parse_workflow(_mapping(data.get("workflow"), "workflow")),
    )

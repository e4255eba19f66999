"""
studio_config -- single public entrypoint for studio configuration.

Responsibility:
    ``get_active_config()`` is the one way runtime code obtains
    configuration.  It reads the YAML file named by the ``STUDIO_CONFIG``
    environment variable, or the bundled ``defaults.yaml``.

Architecture position:
    Configuration sits above ``studio_kernel`` and below
    ``studio_services``.  The kernel never imports from this package.
"""

from __future__ import annotations

import os
from pathlib import Path

from studio_config.loader import load_yaml_file, parse_config
from studio_config.schema import ReminderSettings, StudioConfig, WorkflowSettings
from studio_kernel.logging_config import get_logger

__all__ = [
    "get_active_config",
    "StudioConfig",
    "WorkflowSettings",
    "ReminderSettings",
]

_logger = get_logger("config")

CONFIG_ENV_VAR = "STUDIO_CONFIG"
DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(path: Path | str | None = None) -> StudioConfig:
    """Load and validate the active configuration.

    Resolution order: explicit ``path``, then ``$STUDIO_CONFIG``, then the
    bundled defaults.

    Raises:
        FileNotFoundError: If the resolved file does not exist.
        ConfigError: If a value fails validation.
    """
    resolved = Path(path or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)
    config = parse_config(load_yaml_file(resolved))
    _logger.info(
        "studio_config_loaded",
        extra={
            "config_path": str(resolved),
            "studio_name": config.studio_name,
            "reminders_enabled": config.workflow.reminders.enabled,
        },
    )
    return config

"""
studio_services.wiring -- Composition root for the workflow engine.

Builds the collaborators from the active configuration, binds them into the
transition registry once, and returns a ready ``WorkflowEngine``.  Callers
that need a different collaborator (tests, a real mail sender) pass it in.
"""

from __future__ import annotations

from collections.abc import Callable

from sqlalchemy.orm import Session

from studio_config import StudioConfig, get_active_config
from studio_kernel.domain.clock import Clock, SystemClock
from studio_kernel.logging_config import get_logger
from studio_modules.hooks import WorkflowHooks
from studio_modules.registry import build_transition_registry
from studio_services.conflict_checker import SqlConflictChecker
from studio_services.document_service import DocumentService
from studio_services.notification_service import (
    NotificationSender,
    NotificationService,
)
from studio_services.status_store import SqlStatusStore
from studio_services.workflow_engine import WorkflowEngine

logger = get_logger("services.wiring")


def build_workflow_hooks(
    session: Session,
    config: StudioConfig,
    clock: Clock,
    sender: NotificationSender | None = None,
) -> WorkflowHooks:
    """SQLAlchemy-backed collaborators for the transition tables."""
    settings = config.workflow
    return WorkflowHooks(
        conflicts=SqlConflictChecker(session, settings.conflict_statuses),
        documents=DocumentService(session, settings, clock),
        notifications=NotificationService(
            session,
            sender=sender,
            clock=clock,
            reminders=settings.reminders,
            studio_name=config.studio_name,
        ),
        clock=clock,
    )


def build_workflow_engine(
    session: Session,
    config: StudioConfig | None = None,
    clock: Clock | None = None,
    sender: NotificationSender | None = None,
    outcome_sink: Callable[[dict], None] | None = None,
) -> WorkflowEngine:
    """Wire a ``WorkflowEngine`` over ``session``.

    ``config`` defaults to ``get_active_config()``; ``clock`` to the system
    clock; ``sender`` to the logging sender.
    """
    config = config or get_active_config()
    clock = clock or SystemClock()
    hooks = build_workflow_hooks(session, config, clock, sender)
    registry = build_transition_registry(hooks)
    engine = WorkflowEngine(registry, SqlStatusStore(session), outcome_sink=outcome_sink)
    logger.info("workflow_engine_ready", extra={"workflow_kinds": list(registry.kinds())})
    return engine

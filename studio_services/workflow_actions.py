"""
studio_services.workflow_actions -- Caller-facing facade over the engine.

Wraps ``WorkflowEngine`` for the UI and HTTP layers: turns a
``TransitionResult`` into a user message, fans it out to optional success
and error callbacks, and lists the "Change to <status>" actions available
from a status.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from studio_kernel.domain.workflow import (
    EntityKind,
    TransitionResult,
    entity_attr,
    kind_value,
    status_value,
)
from studio_kernel.exceptions import TransitionNotAllowedError
from studio_kernel.logging_config import get_logger
from studio_services.workflow_engine import WorkflowEngine

logger = get_logger("services.workflow_actions")

DEFAULT_FAILURE_MESSAGE = "Transition failed"


@dataclass(frozen=True)
class ActionOutcome:
    """What the caller shows the user after a transition attempt."""

    success: bool
    message: str
    result: TransitionResult | None = None


class WorkflowActions:
    """Runs transitions on behalf of a user and reports them as messages."""

    def __init__(
        self,
        engine: WorkflowEngine,
        on_success: Callable[[str], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._engine = engine
        self._on_success = on_success
        self._on_error = on_error

    def transition(
        self,
        entity_kind: EntityKind | str,
        entity: Any,
        target_status: Any,
        message: str | None = None,
    ) -> ActionOutcome:
        """Execute the transition and build the user-facing message.

        ``message`` replaces the default success text; failures always
        report the engine's error.
        """
        kind = kind_value(entity_kind)
        target = status_value(target_status)
        result = self._engine.execute_transition(kind, entity, target)

        if result.success:
            text = message or f"{kind} status updated to {target}"
            if self._on_success is not None:
                self._on_success(text)
            return ActionOutcome(success=True, message=text, result=result)

        text = result.error or DEFAULT_FAILURE_MESSAGE
        if self._on_error is not None:
            self._on_error(text)
        return ActionOutcome(success=False, message=text, result=result)

    def transition_or_raise(
        self,
        entity_kind: EntityKind | str,
        entity: Any,
        target_status: Any,
    ) -> TransitionResult:
        """Strict variant for callers that branch on exceptions.

        Raises:
            TransitionNotAllowedError: No edge leads from the entity's
                current status to ``target_status``.  Checked before any
                predicate runs or anything is written.
        """
        kind = kind_value(entity_kind)
        current = status_value(entity_attr(entity, "status"))
        target = status_value(target_status)
        if not self._engine.is_valid_transition(kind, current, target):
            logger.info(
                "transition_rejected",
                extra={"from_status": current, "to_status": target, "workflow_kind": kind},
            )
            raise TransitionNotAllowedError(kind, current, target)
        return self._engine.execute_transition(kind, entity, target)

    def available_actions(
        self,
        entity_kind: EntityKind | str,
        current_status: Any,
    ) -> list[tuple[str, str]]:
        """(target status, button label) pairs for the current status."""
        return [
            (target, f"Change to {target}")
            for target in self._engine.get_valid_transitions(entity_kind, current_status)
        ]

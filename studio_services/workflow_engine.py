"""
studio_services.workflow_engine -- Workflow transition execution.

Responsibility:
    Executes a status change on a booking, invoice or editing job: finds the
    first matching transition in the injected registry, runs its validation
    predicate, commits the new status through the storage collaborator and
    then runs the transition's side effect.

Architecture position:
    Services layer.  Thin coordinator: transition tables come from
    ``studio_modules.registry``, persistence from a ``StatusStore``.  The
    engine owns no state besides those two collaborators.

Invariants enforced:
    - ``execute_transition`` never raises.  Every failure becomes a
      ``TransitionResult`` with ``success=False``.
    - Nothing is written unless a transition matched and its predicate passed.
    - The side effect runs only after the status commit succeeded and its
      failure never reverts that commit: the result then carries
      ``status_committed=True`` and ``side_effects_completed=False``.
    - The commit is compare-and-swap on the status read from the entity, so
      a concurrent change between validation and commit is reported as a
      commit failure instead of being overwritten.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from studio_kernel.domain.workflow import (
    EntityKind,
    StatusStore,
    TransitionRegistry,
    TransitionResult,
    ValidationOutcome,
    entity_attr,
    kind_value,
    status_value,
)
from studio_kernel.logging_config import LogContext, get_logger

logger = get_logger("services.workflow_engine")

# Trace message and outcome codes for structured logging
TRACE_TYPE_WORKFLOW_TRANSITION = "WORKFLOW_TRANSITION"
OUTCOME_SUCCESS = "success"
OUTCOME_NO_TRANSITION = "no_transition"
OUTCOME_VALIDATION_FAILED = "validation_failed"
OUTCOME_VALIDATION_ERROR = "validation_error"
OUTCOME_COMMIT_FAILED = "commit_failed"
OUTCOME_SIDE_EFFECT_FAILED = "side_effect_failed"

VALIDATION_FAILED_MESSAGE = "Validation failed for this transition"


def invalid_transition_message(current_status: Any, target_status: Any) -> str:
    return f"Invalid transition from {status_value(current_status)} to {status_value(target_status)}"


def _emit_workflow_trace(
    entity_kind: str,
    entity_id: Any,
    from_status: str | None,
    to_status: str | None,
    outcome: str,
    reason: str,
    duration_ms: float,
    transition_name: str | None = None,
    outcome_sink: Callable[[dict], None] | None = None,
) -> None:
    """Emit a structured workflow transition record."""
    record: dict[str, Any] = {
        "trace_type": TRACE_TYPE_WORKFLOW_TRANSITION,
        "ts": datetime.now(UTC).isoformat(),
        "entity_kind": entity_kind,
        "entity_id": None if entity_id is None else str(entity_id),
        "from_status": from_status,
        "to_status": to_status,
        "outcome": outcome,
        "reason": reason,
        "duration_ms": round(duration_ms, 3),
    }
    if transition_name is not None:
        record["transition"] = transition_name
    record.update(LogContext.get_all())
    level = "info" if outcome == OUTCOME_SUCCESS else "warning"
    getattr(logger, level)("workflow_transition", extra=record)
    record["message"] = "workflow_transition"
    if outcome_sink is not None:
        # Sink failures are logged, never raised.
        try:
            outcome_sink(record)
        except Exception:
            logger.exception(
                "workflow_outcome_sink_failed",
                extra={"entity_kind": entity_kind, "outcome": outcome},
            )


class WorkflowEngine:
    """Executes entity status transitions against an immutable registry."""

    def __init__(
        self,
        registry: TransitionRegistry,
        store: StatusStore,
        outcome_sink: Callable[[dict], None] | None = None,
    ) -> None:
        self._registry = registry
        self._store = store
        self._outcome_sink = outcome_sink

    @property
    def registry(self) -> TransitionRegistry:
        return self._registry

    def execute_transition(
        self,
        entity_kind: EntityKind | str,
        entity: Any,
        target_status: Any,
    ) -> TransitionResult:
        """Move ``entity`` to ``target_status``.

        ``entity`` is a snapshot (dataclass, ORM row or mapping) exposing at
        least ``id`` and ``status``.  It is passed unchanged to the
        predicate and the side effect.
        """
        kind = kind_value(entity_kind)
        entity_id = entity_attr(entity, "id")
        current = status_value(entity_attr(entity, "status"))
        target = status_value(target_status)

        with LogContext.bind(
            entity_kind=kind,
            entity_id=None if entity_id is None else str(entity_id),
        ):
            return self._execute(kind, entity, entity_id, current, target)

    def _execute(
        self,
        kind: str,
        entity: Any,
        entity_id: Any,
        current: str | None,
        target: str | None,
    ) -> TransitionResult:
        t0 = time.monotonic()

        def trace(outcome: str, reason: str, name: str | None = None) -> None:
            _emit_workflow_trace(
                entity_kind=kind,
                entity_id=entity_id,
                from_status=current,
                to_status=target,
                outcome=outcome,
                reason=reason,
                duration_ms=(time.monotonic() - t0) * 1000,
                transition_name=name,
                outcome_sink=self._outcome_sink,
            )

        # 1. First transition whose from-set holds the current status
        transition = self._registry.find(kind, current, target)
        if transition is None:
            message = invalid_transition_message(current, target)
            trace(OUTCOME_NO_TRANSITION, message)
            return TransitionResult(
                success=False,
                error=message,
                from_status=current,
                to_status=target,
            )

        # 2. Validation predicate
        if transition.validate is not None:
            try:
                verdict = ValidationOutcome.of(transition.validate(entity))
            except Exception as exc:  # noqa: BLE001
                trace(OUTCOME_VALIDATION_ERROR, str(exc), transition.name)
                return TransitionResult(
                    success=False,
                    error=str(exc),
                    reason=str(exc),
                    from_status=current,
                    to_status=target,
                )
            if not verdict.passed:
                trace(OUTCOME_VALIDATION_FAILED, verdict.reason, transition.name)
                return TransitionResult(
                    success=False,
                    error=VALIDATION_FAILED_MESSAGE,
                    reason=verdict.reason,
                    from_status=current,
                    to_status=target,
                )

        # 3. Commit (compare-and-swap on the status we matched on)
        try:
            self._store.update_status(kind, entity_id, target, expected_status=current)
        except Exception as exc:  # noqa: BLE001
            trace(OUTCOME_COMMIT_FAILED, str(exc), transition.name)
            return TransitionResult(
                success=False,
                error=str(exc),
                reason=str(exc),
                from_status=current,
                to_status=target,
            )

        # 4. Side effect: best effort, the commit above stands regardless
        if transition.effect is not None:
            try:
                transition.effect(entity)
            except Exception as exc:  # noqa: BLE001
                logger.error(
                    "workflow_side_effect_failed",
                    extra={"transition": transition.name, "error": str(exc)},
                    exc_info=True,
                )
                trace(OUTCOME_SIDE_EFFECT_FAILED, str(exc), transition.name)
                return TransitionResult(
                    success=False,
                    error=str(exc),
                    reason=str(exc),
                    from_status=current,
                    to_status=target,
                    status_committed=True,
                    side_effects_completed=False,
                )

        trace(OUTCOME_SUCCESS, "", transition.name)
        return TransitionResult(
            success=True,
            from_status=current,
            to_status=target,
            status_committed=True,
            side_effects_completed=True,
        )

    def get_valid_transitions(
        self,
        entity_kind: EntityKind | str,
        current_status: Any,
    ) -> list[str]:
        """Targets reachable from ``current_status``, in table order.

        Duplicates are kept when two transitions share a target.  Validation
        predicates are not consulted.
        """
        return self._registry.targets_from(entity_kind, current_status)

    def is_valid_transition(
        self,
        entity_kind: EntityKind | str,
        from_status: Any,
        to_status: Any,
    ) -> bool:
        """True when an edge exists; validation predicates are not consulted."""
        return self._registry.find(entity_kind, from_status, to_status) is not None

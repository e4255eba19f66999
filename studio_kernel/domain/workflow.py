"""
Canonical workflow types (``studio_kernel.domain.workflow``).

Responsibility
--------------
Pure value objects for the studio's entity state machines: the entity kinds,
a single transition edge, the immutable per-kind transition registry, the
result of executing a transition, and the storage protocol the engine
commits through.

Architecture position
---------------------
**Kernel domain layer** -- pure value objects.  ZERO I/O.  No imports from
``db/``, ``services/``, or outer layers.  Concrete transition tables live in
``studio_modules``; the engine that executes them lives in
``studio_services.workflow_engine``.

Invariants enforced
-------------------
* A status is only meaningful together with its entity kind.  The registry is
  keyed by kind and every lookup is scoped to one kind's list; statuses of
  different kinds are never compared.
* Every transition has a non-empty source status set.
* The registry is read-only after construction.  Within one kind, the first
  transition matching a (from, to) pair wins; duplicates are reported by
  ``ambiguous_edges()`` as a configuration defect, never as a runtime error.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable
from uuid import UUID


class EntityKind(str, Enum):
    """The three entity kinds governed by the workflow engine."""

    BOOKING = "booking"
    INVOICE = "invoice"
    EDITING = "editing"


def kind_value(kind: EntityKind | str) -> str:
    """Normalize an entity kind tag to its plain string value."""
    if isinstance(kind, Enum):
        return kind.value
    return str(kind)


def status_value(status: Any) -> str | None:
    """Normalize a status (enum member, string or None) to a plain string."""
    if status is None:
        return None
    if isinstance(status, Enum):
        return status.value
    return str(status)


def entity_attr(entity: Any, key: str, default: Any = None) -> Any:
    """Read ``key`` from an entity snapshot that is either an object or a mapping."""
    if entity is None:
        return default
    if isinstance(entity, Mapping):
        return entity.get(key, default)
    return getattr(entity, key, default)


@dataclass(frozen=True)
class ValidationOutcome:
    """Verdict of a validation predicate, with the reason when it declines.

    Predicates may return a plain ``bool``; the engine wraps it with
    ``ValidationOutcome.of``.
    """

    passed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.passed

    @classmethod
    def ok(cls) -> ValidationOutcome:
        return cls(passed=True)

    @classmethod
    def declined(cls, reason: str) -> ValidationOutcome:
        return cls(passed=False, reason=reason)

    @classmethod
    def of(cls, verdict: bool | ValidationOutcome) -> ValidationOutcome:
        if isinstance(verdict, ValidationOutcome):
            return verdict
        return cls(passed=bool(verdict))


Predicate = Callable[[Any], "bool | ValidationOutcome"]
SideEffect = Callable[[Any], None]


@dataclass(frozen=True)
class Transition:
    """A legal edge in one entity kind's state graph.

    Contract: frozen.  ``from_states`` is a non-empty frozenset of plain status
    strings; ``to_state`` is the single target.  ``validate`` gates the edge
    (absent means always allowed).  ``effect`` runs only after the new status
    has been committed.
    """

    from_states: frozenset[str]
    to_state: str
    name: str = ""
    validate: Predicate | None = field(default=None, compare=False)
    effect: SideEffect | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        sources = frozenset(status_value(s) for s in self.from_states)
        if not sources:
            raise ValueError("Transition requires at least one source status")
        object.__setattr__(self, "from_states", sources)
        object.__setattr__(self, "to_state", status_value(self.to_state))
        if not self.name:
            object.__setattr__(self, "name", f"to_{self.to_state.lower().replace(' ', '_')}")

    def admits(self, current_status: Any) -> bool:
        """True when this edge may be taken from ``current_status``."""
        current = status_value(current_status)
        return current is not None and current in self.from_states

    def matches(self, current_status: Any, target_status: Any) -> bool:
        return self.to_state == status_value(target_status) and self.admits(current_status)


class TransitionRegistry:
    """Immutable mapping from entity kind to its ordered transition list.

    Built once at startup from code constants and injected into the engine.
    Unknown kinds have no legal moves: ``transitions_for`` returns an empty
    tuple instead of raising.
    """

    __slots__ = ("_table",)

    def __init__(self, transitions: Mapping[EntityKind | str, Iterable[Transition]]):
        table = {kind_value(kind): tuple(edges) for kind, edges in transitions.items()}
        object.__setattr__(self, "_table", MappingProxyType(table))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("TransitionRegistry is immutable")

    def transitions_for(self, entity_kind: EntityKind | str) -> tuple[Transition, ...]:
        return self._table.get(kind_value(entity_kind), ())

    def kinds(self) -> tuple[str, ...]:
        return tuple(self._table)

    def find(
        self,
        entity_kind: EntityKind | str,
        current_status: Any,
        target_status: Any,
    ) -> Transition | None:
        """Return the first transition for (current, target), or None."""
        for transition in self.transitions_for(entity_kind):
            if transition.matches(current_status, target_status):
                return transition
        return None

    def targets_from(self, entity_kind: EntityKind | str, current_status: Any) -> list[str]:
        """Targets reachable from ``current_status`` in table order, duplicates kept."""
        return [
            t.to_state
            for t in self.transitions_for(entity_kind)
            if t.admits(current_status)
        ]

    def ambiguous_edges(self) -> list[tuple[str, str, str]]:
        """List (kind, from, to) pairs matched by more than one transition."""
        defects: list[tuple[str, str, str]] = []
        for kind, edges in self._table.items():
            seen: set[tuple[str, str]] = set()
            for t in edges:
                for source in sorted(t.from_states):
                    pair = (source, t.to_state)
                    if pair in seen:
                        defects.append((kind, source, t.to_state))
                    seen.add(pair)
        return defects


@dataclass(frozen=True)
class TransitionResult:
    """Result of executing a workflow transition.

    ``success`` / ``error`` keep the caller-facing shape.  ``status_committed``
    and ``side_effects_completed`` separate the durable fact from the
    best-effort follow-up: a side-effect failure reports ``success=False``
    while ``status_committed`` stays True.
    """

    success: bool
    error: str | None = None
    reason: str = ""
    from_status: str | None = None
    to_status: str | None = None
    status_committed: bool = False
    side_effects_completed: bool = False

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"success": self.success}
        if self.error is not None:
            payload["error"] = self.error
        return payload


@runtime_checkable
class StatusStore(Protocol):
    """Storage collaborator the engine commits status changes through.

    ``update_status`` must be atomic per call and compare-and-swap on
    ``expected_status``: the write happens only if the stored status still
    equals it, otherwise a ``StaleStatusError`` is raised.  A missing row
    raises ``EntityNotFoundError``.
    """

    def get_status(self, entity_kind: str, entity_id: UUID | str) -> str:
        ...

    def update_status(
        self,
        entity_kind: str,
        entity_id: UUID | str,
        new_status: str,
        expected_status: str | None,
    ) -> None:
        ...

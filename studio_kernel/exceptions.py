"""
Typed exception hierarchy for the studio workflow kernel.

Every error carries a machine-readable ``code`` class attribute and the
structured data needed to act on it, so callers catch by type rather than
by parsing messages.

    StudioError (base)
    |
    +-- EntityError
    |   +-- EntityNotFoundError
    |   +-- UnknownEntityKindError
    |   +-- UnknownStatusError
    |
    +-- WorkflowError
    |   +-- TransitionNotAllowedError
    |
    +-- ConcurrencyError
    |   +-- StaleStatusError
    |
    +-- ConfigError

The workflow engine never lets these escape ``execute_transition``: they
are raised by the storage, conflict-check and side-effect collaborators and
normalized by the engine into a failed ``TransitionResult`` whose ``error``
is ``str(exc)``.
"""


class StudioError(Exception):
    """
    Base exception for all studio kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "STUDIO_ERROR"


# Entity-related exceptions


class EntityError(StudioError):
    """Base exception for entity lookup errors."""

    code: str = "ENTITY_ERROR"


class EntityNotFoundError(EntityError):
    """The storage layer has no row for the given kind and id."""

    code: str = "ENTITY_NOT_FOUND"

    def __init__(self, entity_kind: str, entity_id: str):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} {entity_id} not found")


class UnknownEntityKindError(EntityError):
    """An entity kind outside booking / invoice / editing was requested."""

    code: str = "UNKNOWN_ENTITY_KIND"

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        super().__init__(f"Unknown entity kind: {entity_kind}")


class UnknownStatusError(EntityError):
    """A status literal does not belong to the kind's enumeration."""

    code: str = "UNKNOWN_STATUS"

    def __init__(self, entity_kind: str, status: str):
        self.entity_kind = entity_kind
        self.status = status
        super().__init__(f"Unknown {entity_kind} status: {status}")


# Workflow-related exceptions


class WorkflowError(StudioError):
    """Base exception for workflow definition and transition errors."""

    code: str = "WORKFLOW_ERROR"


class TransitionNotAllowedError(WorkflowError):
    """Raised by strict callers that want an exception instead of a result."""

    code: str = "TRANSITION_NOT_ALLOWED"

    def __init__(self, entity_kind: str, from_status: str | None, to_status: str):
        self.entity_kind = entity_kind
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Invalid transition from {from_status} to {to_status}")


# Concurrency-related exceptions


class ConcurrencyError(StudioError):
    """Base exception for concurrent modification errors."""

    code: str = "CONCURRENCY_ERROR"


class StaleStatusError(ConcurrencyError):
    """The stored status no longer matches the status read at transition start."""

    code: str = "STALE_STATUS"

    def __init__(self, entity_kind: str, entity_id: str, expected_status: str | None):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        self.expected_status = expected_status
        super().__init__(
            f"Status of {entity_kind} {entity_id} changed concurrently: "
            f"expected {expected_status}"
        )


# Configuration exceptions


class ConfigError(StudioError):
    """Configuration file is missing required values or holds invalid ones."""

    code: str = "CONFIG_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration value for '{field}': {reason}")

"""
Editing Workflow.

State machine for post-production jobs:

    Queue ──start──> In Progress ──submit_for_review──> Client Review ──approve──> Completed
                         ^                                   │
                         └──resume── Revisions Needed <──request_revisions

No guards: any editor may move a job along.  Review and delivery notify the
client; a revision request bumps the job's revision counter.
"""

from studio_kernel.domain.workflow import SideEffect, Transition
from studio_modules.editing.models import EditingStatus
from studio_modules.hooks import WorkflowHooks


def _on_client_review(hooks: WorkflowHooks) -> SideEffect:
    def _effect(job) -> None:
        hooks.notifications.notify_client_review(job)

    return _effect


def _on_revisions_needed(hooks: WorkflowHooks) -> SideEffect:
    def _effect(job) -> None:
        hooks.documents.record_revision_request(job)
        hooks.notifications.notify_revision_requested(job)

    return _effect


def _on_completed(hooks: WorkflowHooks) -> SideEffect:
    def _effect(job) -> None:
        hooks.notifications.notify_delivery(job)

    return _effect


def editing_transitions(hooks: WorkflowHooks) -> tuple[Transition, ...]:
    """Ordered editing-job transitions bound to ``hooks``."""
    return (
        Transition(
            frozenset({EditingStatus.QUEUE}),
            EditingStatus.IN_PROGRESS,
            name="start",
        ),
        Transition(
            frozenset({EditingStatus.IN_PROGRESS}),
            EditingStatus.CLIENT_REVIEW,
            name="submit_for_review",
            effect=_on_client_review(hooks),
        ),
        Transition(
            frozenset({EditingStatus.CLIENT_REVIEW}),
            EditingStatus.REVISIONS_NEEDED,
            name="request_revisions",
            effect=_on_revisions_needed(hooks),
        ),
        Transition(
            frozenset({EditingStatus.REVISIONS_NEEDED}),
            EditingStatus.IN_PROGRESS,
            name="resume",
        ),
        Transition(
            frozenset({EditingStatus.CLIENT_REVIEW}),
            EditingStatus.COMPLETED,
            name="approve",
            effect=_on_completed(hooks),
        ),
    )

"""
Status store (``studio_services.status_store``).

Responsibility:
    SQLAlchemy implementation of the ``StatusStore`` protocol the workflow
    engine commits through.

Invariants enforced:
    Compare-and-swap commit.  ``update_status`` issues one conditional
    ``UPDATE <table> SET status = :new WHERE id = :id AND status = :expected``
    and commits it as its own unit of work.  When no row is updated the store
    tells "missing row" (``EntityNotFoundError``) apart from "status moved
    underneath us" (``StaleStatusError``); in both cases nothing is written.
    This re-checks at commit time the precondition the engine matched on.

Failure modes:
    - EntityNotFoundError: no row with that id.
    - StaleStatusError: row exists but its status differs from expected.
    - UnknownEntityKindError: kind outside booking / invoice / editing.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select, update

from studio_kernel.domain.workflow import EntityKind, kind_value
from studio_kernel.exceptions import (
    EntityNotFoundError,
    StaleStatusError,
    UnknownEntityKindError,
)
from studio_kernel.logging_config import get_logger
from studio_kernel.services.base import BaseService
from studio_modules.bookings.orm import BookingModel
from studio_modules.editing.orm import EditingJobModel
from studio_modules.invoices.orm import InvoiceModel

logger = get_logger("services.status_store")

_MODELS = {
    EntityKind.BOOKING.value: BookingModel,
    EntityKind.INVOICE.value: InvoiceModel,
    EntityKind.EDITING.value: EditingJobModel,
}


def _coerce_id(entity_id: UUID | str) -> UUID:
    return entity_id if isinstance(entity_id, UUID) else UUID(str(entity_id))


class SqlStatusStore(BaseService):
    """Status persistence for bookings, invoices and editing jobs."""

    def _model_for(self, entity_kind: EntityKind | str):
        model = _MODELS.get(kind_value(entity_kind))
        if model is None:
            raise UnknownEntityKindError(kind_value(entity_kind))
        return model

    def get_status(self, entity_kind: EntityKind | str, entity_id: UUID | str) -> str:
        model = self._model_for(entity_kind)
        status = self.session.execute(
            select(model.status).where(model.id == _coerce_id(entity_id))
        ).scalar_one_or_none()
        if status is None:
            raise EntityNotFoundError(kind_value(entity_kind), str(entity_id))
        return status

    def update_status(
        self,
        entity_kind: EntityKind | str,
        entity_id: UUID | str,
        new_status: str,
        expected_status: str | None,
    ) -> None:
        model = self._model_for(entity_kind)
        kind = kind_value(entity_kind)
        row_id = _coerce_id(entity_id)

        stmt = (
            update(model)
            .where(model.id == row_id, model.status == expected_status)
            .values(status=new_status)
            .execution_options(synchronize_session="evaluate")
        )

        with self.unit_of_work():
            result = self.session.execute(stmt)
            if result.rowcount == 0:
                exists = self.session.execute(
                    select(model.id).where(model.id == row_id)
                ).first()
                if exists is None:
                    raise EntityNotFoundError(kind, str(row_id))
                raise StaleStatusError(kind, str(row_id), expected_status)

        logger.info(
            "status_committed",
            extra={
                "entity_kind": kind,
                "entity_id": str(row_id),
                "from_status": expected_status,
                "to_status": new_status,
            },
        )

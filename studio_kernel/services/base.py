"""
BaseService -- abstract base for studio services that touch the database.

Responsibility:
    Provides the common constructor and the unit-of-work helper for every
    service that reads or writes studio tables.

Invariants enforced:
    Each public write is its own unit of work: it commits on success and
    rolls back on failure.  The workflow engine relies on this to make the
    status commit durable before any side effect runs, and to keep a failed
    side effect from undoing it.
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

from sqlalchemy.orm import Session

from studio_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for studio services.

    Contract:
        Accepts a SQLAlchemy ``Session`` from the caller.  Writes go through
        ``unit_of_work()``.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """Commit on normal exit, roll back and re-raise on error."""
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

"""
Module ORM Registry (``studio_modules._orm_registry``).

Ensures every module-level SQLAlchemy model is imported so that
``Base.metadata`` contains all table definitions before ``create_tables()``
runs.  Called by ``studio_kernel.db.engine.create_tables``.
"""


def import_all_orm_models() -> None:
    """Import every ``studio_modules.*.orm`` module.  Idempotent."""
    # Referenced tables first (clients, staff) so foreign keys resolve.
    import studio_modules.people.orm  # noqa: F401
    import studio_modules.bookings.orm  # noqa: F401
    import studio_modules.invoices.orm  # noqa: F401
    import studio_modules.editing.orm  # noqa: F401

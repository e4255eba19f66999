"""
Studio modules: bookings, invoices, editing jobs and the people they involve.

Each entity module owns its status enumeration, its frozen domain records,
its ORM mapping and its transition table.  ``registry.build_transition_registry``
assembles the three tables into the immutable registry the engine runs on.
"""

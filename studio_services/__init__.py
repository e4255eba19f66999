"""
Studio services: the workflow engine and the collaborators it runs against.

- ``workflow_engine``      -- executes and queries registry transitions
- ``status_store``         -- compare-and-swap status commits (SQLAlchemy)
- ``conflict_checker``     -- photographer availability lookups
- ``document_service``     -- invoices and editing jobs created by transitions
- ``notification_service`` -- client/staff notifications and payment reminders
- ``workflow_actions``     -- caller-facing facade with user-visible messages
- ``status_badges``        -- status to badge presentation mapping
- ``wiring``               -- builds a ready engine from configuration
"""

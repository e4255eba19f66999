"""Clients and staff members referenced by bookings, invoices and editing jobs."""

"""Booking lifecycle: Pending -> Confirmed -> Completed, or Cancelled."""

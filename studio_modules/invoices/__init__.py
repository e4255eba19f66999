"""Invoice lifecycle: Draft -> Sent -> Paid, with Overdue for late payment."""

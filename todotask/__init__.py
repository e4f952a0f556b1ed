"""Terminal-based tasks and reminders."""

"""Domain services: layout, presentation, reconciliation, feed and invites."""

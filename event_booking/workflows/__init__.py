"""Start-up workflows."""

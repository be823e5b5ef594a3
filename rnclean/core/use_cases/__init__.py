"""Use cases — top-level orchestration."""

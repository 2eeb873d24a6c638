"""Authentication and isolation tests."""

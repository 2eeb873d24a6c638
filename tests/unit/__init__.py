"""Unit tests that run without the HTTP layer."""

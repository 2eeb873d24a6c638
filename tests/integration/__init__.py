"""
API test package for the Task Tracker.

Tests use the Flask test client and cover CRUD, listing, validation and
error handling.
"""

"""
Test suite for the Task Tracker API.

This package contains:
- unit/: query builder, tokens, models and stores without HTTP
- integration/: endpoint tests through the Flask test client
- security/: authentication and owner-isolation probes
"""

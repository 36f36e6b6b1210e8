"""Test suite for the DSAGrind auth service.

- unit/: Handlers, entities and adapters with mocked dependencies
- integration/: Adapters against fakeredis, SQLite and mocked HTTP
- api/: HTTP endpoints through the FastAPI app
"""

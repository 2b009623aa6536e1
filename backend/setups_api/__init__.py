"""
Setups API - Application Package
==================================

What: The `setups_api` package: a REST controller for "setup" records.
Who:  Imported by uvicorn (`setups_api.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes + Dependencies (HTTP)   │  ← status codes, auth header, body parsing
    ├─────────────────────────────────────┤
    │   Services (guards, sanitizer,      │  ← ownership rules, persistence calls
    │   setup/auth services)              │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes stay thin: they resolve the caller, hand the request to the
    SetupService and shape the response. Every failure is raised as a typed
    exception and rendered by the handlers registered in main.py.
"""

__version__ = "1.0.0"

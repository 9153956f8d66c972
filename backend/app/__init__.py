"""
Back Office API - Application Package Initializer
=================================================

What: Marks the `app` directory as a Python package.
Who:  Imported by uvicorn (`app.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered the same way for every feature:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Business Logic)         │  ← Authorization, validation, upsert
    ├─────────────────────────────────────┤
    │   Stores / Storage (Collaborators)  │  ← Typed failures, no HTTP
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the database directly and services never build
    HTTP responses; exceptions cross the boundary and are rendered by the
    global handlers registered in `app.main`.
"""

__version__ = "1.0.0"

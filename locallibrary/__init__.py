"""
Local Library: Application Package
===================================

What: The server-rendered catalog for authors, books, genres and book copies.
Who:  Imported by uvicorn (`locallibrary.main:app`), Alembic, pytest and the seed script.

Architecture Note:
    ┌─────────────────────────────────────┐
    │      Routes (HTML handlers)         │  ← parse form, render or redirect
    ├─────────────────────────────────────┤
    │      Schemas (form validation)      │  ← normalize, sanitize, validate
    ├─────────────────────────────────────┤
    │      Services (data access)         │  ← queries, fan-out reads, writes
    ├─────────────────────────────────────┤
    │      Models (SQLAlchemy ORM)        │  ← tables + derived fields
    └─────────────────────────────────────┘

    Routes hold no business rules: a handler reads the request, asks a service
    for records, and hands them to a Jinja2 template.
"""

__version__ = "1.0.0"

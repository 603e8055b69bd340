"""
Exercise Tracker — Application Package
=======================================

What: REST API for logging exercises against users.
Who:  Imported by uvicorn (`exercise_tracker.main:app`), the console script,
      and the test suite.

Layering:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (Query/Response Mapper) │  ← filters, shaping, validation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

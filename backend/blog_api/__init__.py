"""
Blog API Backend — Application Package
========================================

A small CRUD REST API for blog posts, stored in a single SQLite file.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, statements
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy + aiosqlite
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
NoteKeeper Backend: Application Package
========================================

Layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services (Validator, Identifiers,  │  ← Rules and orchestration
    │  Duplicate Guard, Notes, Users)     │
    ├─────────────────────────────────────┤
    │   Stores (NoteStore, UserStore)     │  ← Keyed persistence
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
Notes API — Application Package
=================================

Layers:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← NoteService
    ├─────────────────────────────────────┤
    │             Schemas (Data)          │  ← Pydantic models
    ├─────────────────────────────────────┤
    │        Store (Persistence)          │  ← DocumentStore / FirebaseStore
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

"""
Inventory API - Application Package Initializer
================================================

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Data Access Layer)   │  ← CRUD over the collection
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← Document layout + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← AsyncMongoClient lifecycle
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

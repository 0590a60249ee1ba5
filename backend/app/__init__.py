"""
Product API: Application Package
===================================

A CRUD service for a single "product" resource stored in MongoDB.

    ┌─────────────────────────────────────┐
    │      Routes (API Layer)             │  ← HTTP concerns, resolve-by-id
    ├─────────────────────────────────────┤
    │      ProductStore (Persistence)     │  ← validation + Motor calls
    ├─────────────────────────────────────┤
    │      Schemas (Contracts)            │  ← Pydantic models, validate_product
    ├─────────────────────────────────────┤
    │      Database (Connection)          │  ← process-wide Motor client
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

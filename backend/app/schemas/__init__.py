"""Pydantic Schemas: response validation for API endpoints.

Invariants:
    - Schemas describe the HTTP contract; models describe persistence

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

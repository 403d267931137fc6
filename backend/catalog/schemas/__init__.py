"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Request schemas are the per-endpoint shape rules (required, length, email, enum, date, bool)
    - Update schemas: every field optional, but a field that is present is validated fully
    - Response schemas never expose password hashes or token digests

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""

"""API Layer — FastAPI routes, auth/role guards and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON; every error uses the envelope from core/errors.py
"""

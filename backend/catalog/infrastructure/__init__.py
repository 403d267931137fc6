"""Infrastructure Layer — database sessions, credential primitives and logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All driver errors mapped into core/errors.py types before leaving this layer
"""

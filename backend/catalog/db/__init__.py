"""Database Layer — declarative Base and async engine/session factories.

Invariants:
    - Single async engine per process (initialized via init_db)
    - All sessions are async (AsyncSession)
"""

"""Database Metadata — SQLAlchemy declarative Base shared by models and alembic.

Invariants:
    - Single async engine per process lives in infrastructure/database.py
    - All sessions are async (AsyncSession)

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for local runs and tests
"""

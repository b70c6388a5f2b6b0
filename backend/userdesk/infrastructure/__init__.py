"""Infrastructure Layer — database, logging and static-file plumbing.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All database failures surface as DatabaseError

Design Decisions:
    - Thin wrappers over SQLAlchemy/Starlette, one concern per module
"""

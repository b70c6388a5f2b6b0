"""Services Layer — business operations between routes and the database.

Invariants:
    - Services take an AsyncSession and raise core/errors types
    - No FastAPI imports here
"""

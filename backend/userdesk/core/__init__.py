"""Core Layer — pure domain types, errors and query normalization.

Invariants:
    - Core never imports from api/, services/ or infrastructure/
    - No IO in this package

Design Decisions:
    - Pure functions and dataclasses only, tested without a database
"""

"""Schemas — Pydantic models for API boundaries (requests and responses).

Invariants:
    - Wire format is camelCase; Python attributes are snake_case
    - Schemas never import ORM models (they read attributes via from_attributes)
"""

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId wraps the opaque string identifier, never parsed or generated by callers
    - All valid roles encoded as an Enum, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import uuid4


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)


def new_user_id() -> UserId:
    """Mint a fresh opaque identifier."""
    return UserId(str(uuid4()))


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """User roles, mapped to DB `role` column."""
    USER = "USER"
    ADMIN = "ADMIN"


# ─── Pagination defaults ─────────────────────────────────────────

DEFAULT_SKIP = 0
DEFAULT_TAKE = 50

"""User Query — pure normalization of list-users filter parameters.

Invariants:
    - search is trimmed; blank search means "no search clause"
    - is_active: "true" → True, any other supplied string → False, None → no filter
    - skip >= 0, take >= 1 (take has no upper bound)

Design Decisions:
    - Pure dataclass, no SQLAlchemy import: the service layer turns it into clauses
"""

from dataclasses import dataclass

from userdesk.core.domain_types import DEFAULT_SKIP, DEFAULT_TAKE


@dataclass(frozen=True)
class UserQuery:
    """Normalized filter + page for the list operation."""
    search: str | None = None
    role: str | None = None
    is_active: bool | None = None
    skip: int = DEFAULT_SKIP
    take: int = DEFAULT_TAKE


def parse_is_active(raw: str | None) -> bool | None:
    """Coerce the isActive query string the way browsers send it."""
    if raw is None:
        return None
    return raw.strip().lower() == "true"


def build_user_query(
    search: str | None = None,
    role: str | None = None,
    is_active: str | None = None,
    skip: int = DEFAULT_SKIP,
    take: int = DEFAULT_TAKE,
) -> UserQuery:
    """Normalize raw query parameters into a UserQuery."""
    term = search.strip() if search else ""
    return UserQuery(
        search=term or None,
        role=role or None,
        is_active=parse_is_active(is_active),
        skip=max(skip, 0),
        take=max(take, 1),
    )

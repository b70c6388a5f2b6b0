"""User ORM — the single persisted entity.

Invariants:
    - id is an opaque string primary key, assigned on insert, never updated
    - email is unique (unique index ix_users_email)
    - created_at <= updated_at; both timezone-aware
    - role stores UserRole values ("USER" | "ADMIN")

Design Decisions:
    - String(36) id over dialect UUID: any path segment can be looked up and
      simply misses, so malformed ids yield 404 instead of a validation error
    - updated_at set explicitly by the service on every update, onupdate as backstop
"""

from datetime import datetime, timezone

from sqlalchemy import String, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from userdesk.core.domain_types import UserRole, new_user_id
from userdesk.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """A managed user account."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_user_id,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True, index=True,
    )
    phone: Mapped[str] = mapped_column(String(64), nullable=False)
    role: Mapped[str] = mapped_column(
        String(10), nullable=False, default=UserRole.USER.value,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
        onupdate=_utcnow,
    )

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"

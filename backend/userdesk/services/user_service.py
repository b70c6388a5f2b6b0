"""User Service — list, get, create, update, delete and bulk-delete users.

Invariants:
    - email is unique: checked before insert/update, and a constraint violation
      raised by the database at commit is reported as EmailConflictError too
    - id and created_at are never written after insert
    - updated_at is refreshed on every successful update, even with no changes
    - total in list_users counts rows matching the filter before paging
    - Every mutating method commits and refreshes before returning the row

Design Decisions:
    - Service raises typed domain errors; routes never build error responses
    - search uses icontains(autoescape=True): case-insensitive on every dialect,
      and "%" / "_" in the term match literally
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import select, func, delete, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from userdesk.core.errors import (
    EmailConflictError, ErrorContext, InvalidRequestError, ResourceNotFoundError,
)
from userdesk.core.user_query import UserQuery
from userdesk.models.user import User
from userdesk.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


def _require_id(user_id: str) -> str:
    if not user_id or not user_id.strip():
        raise InvalidRequestError("User ID is required", field="id")
    return user_id


def _filter_clauses(query: UserQuery) -> list:
    """Translate a UserQuery into SQLAlchemy WHERE clauses (AND-ed)."""
    clauses = []
    if query.role is not None:
        clauses.append(User.role == query.role)
    if query.is_active is not None:
        clauses.append(User.is_active.is_(query.is_active))
    if query.search is not None:
        clauses.append(or_(
            User.name.icontains(query.search, autoescape=True),
            User.email.icontains(query.search, autoescape=True),
        ))
    return clauses


class UserService:
    """CRUD operations over the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_users(self, query: UserQuery) -> tuple[list[User], int]:
        """Return one page of users (newest first) and the unpaged total."""
        clauses = _filter_clauses(query)
        page = (
            select(User)
            .where(*clauses)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(query.skip)
            .limit(query.take)
        )
        count = select(func.count()).select_from(User).where(*clauses)

        rows = (await self.db.execute(page)).scalars().all()
        total = (await self.db.execute(count)).scalar_one()
        return list(rows), total

    async def get_user(self, user_id: str) -> User:
        """Fetch one user or raise ResourceNotFoundError."""
        user = await self.db.get(User, _require_id(user_id))
        if user is None:
            raise ResourceNotFoundError(
                "User", user_id, ErrorContext(user_id=user_id),
            )
        return user

    async def find_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def create_user(self, body: UserCreate) -> User:
        """Insert a new user; 409 when the email is already taken."""
        if await self.find_by_email(body.email):
            raise EmailConflictError(body.email)

        user = User(
            name=body.name,
            email=body.email,
            phone=body.phone,
            role=body.role.value,
            is_active=body.is_active,
        )
        self.db.add(user)
        await self._commit_or_conflict(body.email)
        await self.db.refresh(user)
        logger.info(f"User created: {user.id}", extra={"user_id": user.id})
        return user

    async def update_user(self, user_id: str, body: UserUpdate) -> User:
        """Apply the fields present in body; untouched fields keep their value."""
        user = await self.get_user(user_id)
        changes = body.changes()

        new_email = changes.get("email")
        if new_email is not None and new_email != user.email:
            if await self.find_by_email(new_email):
                raise EmailConflictError(new_email, ErrorContext(user_id=user_id))

        for attr, value in changes.items():
            setattr(user, attr, value)
        user.updated_at = datetime.now(timezone.utc)

        await self._commit_or_conflict(new_email or user.email)
        await self.db.refresh(user)
        logger.info(
            f"User updated: {user.id} ({', '.join(sorted(changes)) or 'no fields'})",
            extra={"user_id": user.id},
        )
        return user

    async def delete_user(self, user_id: str) -> User:
        """Delete one user and return the row as it was."""
        user = await self.get_user(user_id)
        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"User deleted: {user_id}", extra={"user_id": user_id})
        return user

    async def nuke_users(self) -> int:
        """Delete every user. Returns the number of rows removed."""
        logger.warning("Clearing all users from the database")
        result = await self.db.execute(delete(User))
        await self.db.commit()
        cleared = result.rowcount or 0
        logger.info(
            f"Users table cleared ({cleared} rows)",
            extra={"cleared_count": cleared},
        )
        return cleared

    async def _commit_or_conflict(self, email: str) -> None:
        """Commit; a unique violation that raced the pre-check becomes a 409."""
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Email uniqueness violated at commit: {e.orig}")
            raise EmailConflictError(email)

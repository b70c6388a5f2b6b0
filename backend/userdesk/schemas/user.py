"""User Schemas — Pydantic models with field-level validation for the users API.

Invariants:
    - UserCreate: name, email, phone required and non-empty; role defaults USER,
      is_active defaults True
    - UserUpdate: field presence is explicit (model_fields_set); a present field
      is applied, an absent one is untouched; null is rejected for every field
    - name and email can never be cleared; phone may be set to ""
    - Responses serialize camelCase (isActive, createdAt, updatedAt)

Design Decisions:
    - alias_generator=to_camel + populate_by_name: clients may send either spelling
    - Presence tracked by pydantic itself rather than truthiness, so isActive=false
      and phone="" are honored
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from userdesk.core.domain_types import UserRole

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserCreate(BaseModel):
    """User creation payload."""
    model_config = _CAMEL

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=1, max_length=320)
    phone: str = Field(min_length=1, max_length=64)
    role: UserRole = UserRole.USER
    is_active: bool = True


class UserUpdate(BaseModel):
    """Partial user update: only fields present in the body are applied."""
    model_config = _CAMEL

    name: str | None = Field(None, min_length=1, max_length=255)
    email: str | None = Field(None, min_length=1, max_length=320)
    phone: str | None = Field(None, max_length=64)
    role: UserRole | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        nulls = sorted(
            name for name in self.model_fields_set if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Fields present in the request, keyed by attribute name."""
        data = self.model_dump(include=self.model_fields_set)
        if "role" in data:
            data["role"] = data["role"].value
        return data


class UserResponse(BaseModel):
    """Public user record."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True,
    )

    id: str
    name: str
    email: str
    phone: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """One page of users plus the total matching the filter before paging."""
    data: list[UserResponse]
    total: int


class DeleteUserResponse(BaseModel):
    """Result of deleting a single user."""
    model_config = _CAMEL

    message: str
    deleted_user: UserResponse


class NukeUsersResponse(BaseModel):
    """Result of the bulk delete-all maintenance operation."""
    model_config = _CAMEL

    message: str
    timestamp: datetime
    cleared_count: int

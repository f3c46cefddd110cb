"""Pydantic models for records served by the external user API."""

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """A user record. Unknown fields from the remote API are passed through."""

    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None
    username: str | None = None
    email: str | None = None


class UserResponse(BaseModel):
    """Response model for a single user."""

    user: User


class UserListResponse(BaseModel):
    """Response model for user list."""

    users: list[User]
    count: int

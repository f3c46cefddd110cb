"""User API router, backed by the cached external collection."""

from fastapi import APIRouter, HTTPException, status

from ..deps import UsersDep
from ..models import UserListResponse, UserResponse

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserListResponse)
def list_users(users: UsersDep):
    """Get all users from the external API (cached)."""
    items = users.list_all()
    return UserListResponse(users=items, count=len(items))


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, users: UsersDep):
    """Get a user by ID."""
    user = users.get_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User with ID {user_id} not found",
        )
    return UserResponse(user=user)

"""
Admin users API endpoints.

Provides:
- Create users
- List users (optionally by ids)
- Delete users
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from backend.src.api.dependencies import get_user_service
from backend.src.schemas.user import UserCreate, UserResponse
from backend.src.services.user_service import UserService


router = APIRouter(
    prefix="/admin/users",
    tags=["Admin"],
)


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
def create_user(
    user: UserCreate,
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Create a user; 409 when the email is taken."""
    return UserResponse.model_validate(user_service.create(name=user.name, email=user.email))


@router.get(
    "",
    response_model=List[UserResponse],
    summary="List users",
)
def list_users(
    ids: Optional[List[int]] = Query(None),
    from_: int = Query(0, alias="from", ge=0),
    size: int = Query(10, ge=1),
    user_service: UserService = Depends(get_user_service),
) -> List[UserResponse]:
    users = user_service.list(ids=ids, from_=from_, size=size)
    return [UserResponse.model_validate(u) for u in users]


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a user",
)
def delete_user(
    user_id: int,
    user_service: UserService = Depends(get_user_service),
) -> Response:
    user_service.delete(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

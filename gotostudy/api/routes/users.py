"""User routes."""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Response, status

from ...schemas.models import User
from ...services import UserService
from ..dependencies import get_user_service
from ..schemas import UserCreateRequest, UserReplaceRequest


router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(
    payload: UserCreateRequest, service: UserService = Depends(get_user_service)
) -> User:
    """Register a new user."""
    return service.register_user(User(**payload.model_dump()))


@router.get("", response_model=list[User])
def list_users(service: UserService = Depends(get_user_service)) -> list[User]:
    """List every user."""
    return service.get_all_users()


@router.get("/{user_id}", response_model=User)
def get_user(user_id: UUID, service: UserService = Depends(get_user_service)) -> User:
    """Fetch a user with its tasks."""
    return service.get_user_by_id(user_id)


@router.put("/{user_id}", response_model=User)
def replace_user(
    user_id: UUID,
    payload: UserReplaceRequest,
    service: UserService = Depends(get_user_service),
) -> User:
    """Replace a user's username and email."""
    service.update_user(user_id, User(**payload.model_dump()))
    return service.get_user_by_id(user_id)


@router.patch("/{user_id}", response_model=User)
def update_user_fields(
    user_id: UUID,
    fields: dict[str, Any] = Body(...),
    service: UserService = Depends(get_user_service),
) -> User:
    """Apply a partial update; only ``username`` and ``email`` are accepted."""
    return service.update_user_fields(user_id, fields)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: UUID, service: UserService = Depends(get_user_service)
) -> Response:
    """Delete a user and its tasks."""
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""
Exercise Tracker — User Route Handlers
=======================================

What:  POST /api/users (create) and GET /api/users (list).
"""

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from exercise_tracker.database import get_db_session
from exercise_tracker.routes.payload import read_payload, validate_payload
from exercise_tracker.schemas.common import ErrorResponse
from exercise_tracker.schemas.user import UserCreate, UserResponse
from exercise_tracker.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    status_code=201,
    response_model=UserResponse,
    responses={
        201: {"description": "User created", "model": UserResponse},
        400: {"description": "Missing or invalid username", "model": ErrorResponse},
        409: {"description": "Username already exists", "model": ErrorResponse},
    },
    summary="Create a user",
    description="Accepts `username` as JSON or form data. The username is trimmed and must be unique.",
)
async def create_user(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    payload = validate_payload(UserCreate, await read_payload(request))
    return await user_service.create_user(db, payload)


@router.get(
    "/users",
    response_model=List[UserResponse],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all users",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[UserResponse]:
    """Every user as `{username, id}`, in creation order. No pagination."""
    return await user_service.list_users(db)

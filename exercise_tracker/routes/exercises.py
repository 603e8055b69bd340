"""
Exercise Tracker — Exercise & Log Route Handlers
=================================================

What:  POST /api/users/{user_id}/exercises and GET /api/users/{user_id}/logs.
How:   Each handler resolves the path id to a user first (404 before any
       body validation or write), then validates its input and delegates
       to ExerciseService.

Example:
    POST /api/users/6f1c…/exercises  description=test run&duration=30&date=2023-01-15
    → {"id": "6f1c…", "username": "fcc_test", "description": "test run",
       "duration": 30, "date": "Sun Jan 15 2023"}

    GET /api/users/6f1c…/logs?from=2023-01-01&to=2023-01-31&limit=5
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from exercise_tracker.database import get_db_session
from exercise_tracker.routes.payload import read_payload, validate_payload
from exercise_tracker.schemas.common import ErrorResponse
from exercise_tracker.schemas.exercise import (
    ExerciseCreate,
    ExerciseResponse,
    LogQuery,
    LogResponse,
)
from exercise_tracker.services.exercise_service import exercise_service
from exercise_tracker.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Exercises"])


@router.post(
    "/{user_id}/exercises",
    status_code=201,
    response_model=ExerciseResponse,
    responses={
        201: {"description": "Exercise stored", "model": ExerciseResponse},
        400: {"description": "Invalid description or duration", "model": ErrorResponse},
        404: {"description": "Unknown user id", "model": ErrorResponse},
    },
    summary="Add an exercise to a user",
    description=(
        "Accepts `description`, `duration` (minutes) and an optional `date` as JSON "
        "or form data. A missing or unparseable date is replaced with today's date."
    ),
)
async def add_exercise(
    user_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ExerciseResponse:
    user = await user_service.get_user(db, user_id)
    payload = validate_payload(ExerciseCreate, await read_payload(request))
    return await exercise_service.add_exercise(db, user, payload)


@router.get(
    "/{user_id}/logs",
    response_model=LogResponse,
    responses={
        200: {"description": "Exercise log", "model": LogResponse},
        404: {"description": "Unknown user id", "model": ErrorResponse},
    },
    summary="Get a user's exercise log",
)
async def get_logs(
    user_id: str,
    from_: Optional[str] = Query(
        default=None,
        alias="from",
        description="Inclusive lower date bound (e.g. 2023-01-01). Ignored if malformed.",
    ),
    to: Optional[str] = Query(
        default=None,
        description="Inclusive upper date bound. Ignored if malformed.",
    ),
    limit: Optional[str] = Query(
        default=None,
        description="Maximum entries to return; ignored unless a positive integer.",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> LogResponse:
    """
    Exercises sorted by date ascending. `count` is the number of entries in
    `log`, after `limit` is applied.
    """
    user = await user_service.get_user(db, user_id)
    query = LogQuery.from_params(from_=from_, to=to, limit=limit)
    return await exercise_service.get_log(db, user, query)

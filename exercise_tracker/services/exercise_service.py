"""
Exercise Tracker — Exercise Service
====================================

What:  Adds exercises to a user and builds a user's exercise log.
How:   Takes a user already resolved by UserService, reads/writes the
       exercises table and shapes rows into response models.
Who:   Called by routes/exercises.py.

Log query (GET /api/users/{id}/logs):
    SELECT * FROM exercises
    WHERE user_id = :id [AND date >= :from] [AND date <= :to]
    ORDER BY date ASC, created_at ASC
    [LIMIT :limit]
    → served by idx_exercises_user_date

    `count` is len(log): the number of entries actually returned.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from exercise_tracker.dates import format_calendar_date, parse_calendar_date, today
from exercise_tracker.exceptions import DatabaseError
from exercise_tracker.models.exercise import Exercise
from exercise_tracker.models.user import User
from exercise_tracker.schemas.exercise import (
    ExerciseCreate,
    ExerciseResponse,
    LogEntry,
    LogQuery,
    LogResponse,
)

logger = logging.getLogger(__name__)


class ExerciseService:
    """
    Business logic for the exercises collection.

    Error Handling Strategy:
        Store failures are wrapped in DatabaseError so no driver detail reaches
        the client.
    """

    async def add_exercise(
        self,
        db: AsyncSession,
        user: User,
        payload: ExerciseCreate,
    ) -> ExerciseResponse:
        """
        Persist one exercise for an existing user.

        Workflow:
            1. Resolve the date: absent/unparseable → today (UTC)
            2. Insert and commit
            3. Return user id/name with the exercise, date fixed-format

        The route resolves `user` first, so an unknown id never reaches
        this method and nothing is written for it.

        Raises:
            DatabaseError: insert failed
        """
        exercise_date = parse_calendar_date(payload.date)
        if exercise_date is None:
            if payload.date:
                logger.debug("Unparseable exercise date %r, using today", payload.date)
            exercise_date = today()

        # A failed flush expires every loaded instance, `user` included
        user_id, username = str(user.id), user.username

        exercise = Exercise(
            user_id=user.id,
            description=payload.description,
            duration=payload.duration,
            date=exercise_date,
        )
        try:
            db.add(exercise)
            await db.flush()
            await db.commit()
        except Exception as e:
            await db.rollback()
            logger.error("Database error adding exercise for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the exercise. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

        logger.info(
            "Exercise %s added for user %s (%d min on %s)",
            exercise.id, user_id, exercise.duration, exercise.date,
        )
        return ExerciseResponse(
            id=user_id,
            username=username,
            description=exercise.description,
            duration=exercise.duration,
            date=format_calendar_date(exercise.date),
        )

    async def get_log(
        self,
        db: AsyncSession,
        user: User,
        query: LogQuery,
    ) -> LogResponse:
        """
        A user's exercises within an inclusive date range, oldest first.

        Args:
            db: Async database session
            user: Owner of the log, already resolved from the path id
            query: Already-parsed bounds and limit (see LogQuery)

        Raises:
            DatabaseError: query failed
        """
        user_id, username = str(user.id), user.username

        stmt = select(Exercise).where(Exercise.user_id == user.id)
        if query.from_date is not None:
            stmt = stmt.where(Exercise.date >= query.from_date)
        if query.to_date is not None:
            stmt = stmt.where(Exercise.date <= query.to_date)
        stmt = stmt.order_by(Exercise.date.asc(), Exercise.created_at.asc())
        if query.limit is not None:
            stmt = stmt.limit(query.limit)

        try:
            result = await db.execute(stmt)
            exercises = list(result.scalars().all())
        except Exception as e:
            await db.rollback()
            logger.error("Database error fetching log for %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not fetch the exercise log. Please try again.",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

        log = [
            LogEntry(
                description=exercise.description,
                duration=exercise.duration,
                date=format_calendar_date(exercise.date),
            )
            for exercise in exercises
        ]
        return LogResponse(
            username=username,
            count=len(log),
            id=user_id,
            log=log,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
exercise_service = ExerciseService()

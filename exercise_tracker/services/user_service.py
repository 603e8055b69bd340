"""
Exercise Tracker — User Service
================================

What:  Creates and lists users; resolves the user named by a path id.
Who:   Called by routes/users.py and by ExerciseService.

Uniqueness:
    The username is checked before insert so the common duplicate case gets a
    clean 409. Two concurrent creates can both pass the check; the unique
    index then rejects the second insert, which is reported as the same 409.
"""

import logging
import uuid
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from exercise_tracker.exceptions import ConflictError, DatabaseError, NotFoundError
from exercise_tracker.models.user import User
from exercise_tracker.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(username=user.username, id=str(user.id))


class UserService:
    """Business logic for the users collection."""

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        """
        Insert a new user.

        Raises:
            ConflictError: username already taken (→ 409)
            DatabaseError: store failure (→ 500)
        """
        try:
            existing = await db.execute(
                select(User.id).where(User.username == payload.username)
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError(
                    message=f"Username '{payload.username}' already exists",
                    field="username",
                )

            user = User(username=payload.username)
            db.add(user)
            await db.flush()
            await db.commit()

        except ConflictError:
            raise
        except IntegrityError:
            await db.rollback()
            raise ConflictError(
                message=f"Username '{payload.username}' already exists",
                field="username",
            )
        except Exception as e:
            logger.error("Database error creating user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User created: %s (%s)", user.id, user.username)
        return to_user_response(user)

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        """All users as `{username, id}`, oldest first."""
        try:
            result = await db.execute(
                select(User).order_by(User.created_at.asc(), User.id.asc())
            )
            users = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not fetch users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [to_user_response(user) for user in users]

    async def get_user(self, db: AsyncSession, user_id: str) -> User:
        """
        Resolve a path id to a stored user.

        A malformed id can never match a stored user, so it is reported the
        same way as an unknown one.

        Raises:
            NotFoundError: id malformed or unknown (→ 404)
            DatabaseError: store failure (→ 500)
        """
        try:
            key = uuid.UUID(str(user_id).strip())
        except ValueError:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        try:
            result = await db.execute(select(User).where(User.id == key))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": str(user_id)},
            )

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()

"""
Exercise Tracker — Exercise SQLAlchemy Model
=============================================

What:  ORM model for the `exercises` collection.
Who:   Written by ExerciseService.add_exercise, read by ExerciseService.get_log.

Table Design:
    - user_id: plain indexed UUID column. The owning user is checked by the
      service before insert; the store does not enforce the reference.
    - description: trimmed, at most 100 characters
    - duration: whole minutes, at least 1 (CHECK constraint mirrors the API rule)
      and at most DURATION_MAX_MINUTES so it fits INTEGER on every backend
    - date: calendar date only; time-of-day is never stored
    - created_at: tie-breaker when several exercises share a date

    Composite index (user_id, date):
        Serves the log query: WHERE user_id = :id AND date BETWEEN ... ORDER BY date
"""

import uuid
import datetime as dt

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from exercise_tracker.database import Base

DESCRIPTION_MAX_LENGTH = 100
DURATION_MIN_MINUTES = 1
# Largest value a 32-bit INTEGER column holds
DURATION_MAX_MINUTES = 2**31 - 1


class Exercise(Base):
    """
    One logged exercise session.

    Lifecycle:
        Created by POST /api/users/{id}/exercises; immutable thereafter.
    """

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        comment="Owning user; existence checked by the application",
    )

    description: Mapped[str] = mapped_column(
        String(DESCRIPTION_MAX_LENGTH),
        nullable=False,
    )

    duration: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Duration in minutes",
    )

    date: Mapped[dt.date] = mapped_column(
        Date,
        nullable=False,
        comment="Calendar date of the exercise",
    )

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: dt.datetime.now(dt.timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(f"duration >= {DURATION_MIN_MINUTES}", name="ck_exercises_duration_min"),
        Index("idx_exercises_user_date", "user_id", "date"),
    )

    def __repr__(self) -> str:
        return (
            f"<Exercise(id={self.id}, user_id={self.user_id}, "
            f"duration={self.duration}, date='{self.date}')>"
        )

"""
Exercise Tracker — User SQLAlchemy Model
=========================================

What:  ORM model for the `users` collection.
Who:   Used by UserService for creation/listing and by ExerciseService to
       resolve the user a log or exercise belongs to.

Table Design:
    - UUID primary key generated in Python (portable across PostgreSQL and SQLite)
    - username: trimmed before insert, unique index enforces one owner per name
    - created_at: UTC insertion time, the listing order for GET /api/users
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from exercise_tracker.database import Base

USERNAME_MAX_LENGTH = 50


class User(Base):
    """
    A person whose exercises are being logged.

    Lifecycle:
        Created by POST /api/users; never updated or deleted.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Opaque user identifier",
    )

    username: Mapped[str] = mapped_column(
        String(USERNAME_MAX_LENGTH),
        nullable=False,
        comment="Trimmed display name, unique across the store",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        comment="When this user was created (UTC)",
    )

    __table_args__ = (
        Index("idx_users_username", "username", unique=True),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"

"""
Exercise Tracker — User Schemas
================================

What:  Request and response models for /api/users.
How:   `UserCreate` is the validated form of the create-user body; the
       response models control exactly which fields leave the service.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

from exercise_tracker.models.user import USERNAME_MAX_LENGTH


class UserCreate(BaseModel):
    """Validated body of POST /api/users."""
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v


class UserResponse(BaseModel):
    """`{username, id}` — returned on create and as list items."""
    username: str = Field(description="Trimmed username")
    id: str = Field(description="Opaque user identifier")

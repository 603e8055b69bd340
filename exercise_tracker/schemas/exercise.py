"""
Exercise Tracker — Exercise & Log Schemas
==========================================

What:  Request models for adding exercises and filtering logs, and the
       response models for both endpoints.
How:   Request bodies arrive as JSON or as form fields (all strings), so the
       validators accept numeric strings and strip whitespace before the
       length/range checks run.

Wire shapes:
    POST /api/users/{id}/exercises →
        {"id", "username", "description", "duration", "date"}
    GET  /api/users/{id}/logs →
        {"username", "count", "id", "log": [{"description", "duration", "date"}]}
"""

import logging
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from exercise_tracker.dates import parse_calendar_date
from exercise_tracker.models.exercise import (
    DESCRIPTION_MAX_LENGTH,
    DURATION_MAX_MINUTES,
    DURATION_MIN_MINUTES,
)

logger = logging.getLogger(__name__)

# A larger `limit` cannot be bound as a 64-bit LIMIT and is treated as no cap
LOG_LIMIT_MAX = 2**63 - 1


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ExerciseCreate(BaseModel):
    """
    Validated body of POST /api/users/{id}/exercises.

    `date` stays a raw string here: an unparseable value is not an error,
    it falls back to today when the exercise is stored.
    """
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    duration: int = Field(
        ge=DURATION_MIN_MINUTES,
        le=DURATION_MAX_MINUTES,
        description="Minutes",
    )
    date: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def check_duration(cls, v: Any) -> Any:
        # JSON true/false would otherwise coerce to 1/0
        if isinstance(v, bool):
            raise ValueError("duration must be a whole number of minutes")
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("date", mode="before")
    @classmethod
    def stringify_date(cls, v: Any) -> Any:
        if v is None:
            return None
        return str(v).strip() or None


class LogQuery(BaseModel):
    """
    Parsed query string of GET /api/users/{id}/logs.

    Lenient by contract: a malformed `from`/`to` drops that bound and a
    missing, non-numeric, non-positive or oversized `limit` means "no cap".
    Nothing in the query string can make the request fail.
    """
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    limit: Optional[int] = None

    @classmethod
    def from_params(
        cls,
        from_: Optional[str] = None,
        to: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> "LogQuery":
        return cls(
            from_date=_date_bound("from", from_),
            to_date=_date_bound("to", to),
            limit=_positive_int(limit),
        )


def _date_bound(name: str, value: Optional[str]) -> Optional[date]:
    parsed = parse_calendar_date(value)
    if parsed is None and value and value.strip():
        logger.debug("Ignoring malformed '%s' bound: %r", name, value)
    return parsed


def _positive_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return None
    if parsed <= 0 or parsed > LOG_LIMIT_MAX:
        return None
    return parsed


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ExerciseResponse(BaseModel):
    """User id and name plus the stored exercise, date fixed-format."""
    id: str = Field(description="Owning user's identifier")
    username: str
    description: str
    duration: int = Field(description="Minutes")
    date: str = Field(description='Calendar date, e.g. "Sun Jan 15 2023"')


class LogEntry(BaseModel):
    description: str
    duration: int
    date: str


class LogResponse(BaseModel):
    """
    A user's exercise log.

    `count` is the number of entries in `log`, i.e. after `limit` is applied.
    """
    username: str
    count: int
    id: str
    log: List[LogEntry]

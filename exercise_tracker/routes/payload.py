"""
Exercise Tracker — Request Body Parsing
========================================

What:  Turns a JSON or form-encoded body into a validated request model.
How:   `read_payload` decodes the body by Content-Type into a plain dict;
       `validate_payload` runs the Pydantic model over it and converts any
       failure into the application's ValidationError (400), so every bad
       body produces the same error shape.
"""

from typing import Any, Dict, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from exercise_tracker.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Decode the request body into a dict.

    JSON bodies must be objects. Form bodies keep only text fields. An empty
    body decodes to {} so the model reports the missing fields.
    """
    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type == "application/json" or content_type.endswith("+json"):
        body = await request.body()
        if not body.strip():
            return {}
        try:
            data = await request.json()
        except ValueError:
            raise ValidationError(message="Request body is not valid JSON")
        if not isinstance(data, dict):
            raise ValidationError(message="Request body must be a JSON object")
        return data

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body.strip():
        return {}
    raise ValidationError(
        message="Unsupported content type; send JSON or form data",
        context={"content_type": content_type or "none"},
    )


def validate_payload(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Validate `data` against `model`, raising ValidationError on failure."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
            }
            for err in e.errors()
        ]
        first = errors[0]
        raise ValidationError(
            message=f"{first['field']}: {first['message']}",
            field=first["field"],
            context={"errors": errors},
        )

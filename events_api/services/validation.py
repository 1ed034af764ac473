"""
Run a pydantic schema over a request payload and report failures per field.
"""

from typing import Any, Optional, TypeVar

import pydantic
from pydantic import BaseModel

from events_api.services.exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)


def _field_label(field: str) -> str:
    return field.replace("_", " ")


def _message(error: dict[str, Any], field: str) -> str:
    if error["type"] == "missing":
        return f"The {_field_label(field)} field is required."
    if error["type"] == "value_error":
        # our own validators raise ValueError with a complete sentence
        return str(error["ctx"]["error"])
    return error["msg"]


def field_errors(exc: pydantic.ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "payload"
        errors.setdefault(field, []).append(_message(error, field))
    return errors


def validate(schema: type[M], payload: Any, context: Optional[dict[str, Any]] = None) -> M:
    try:
        return schema.model_validate(payload, context=context)
    except pydantic.ValidationError as exc:
        raise ValidationError(field_errors(exc)) from exc

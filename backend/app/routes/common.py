"""
Singers API — Shared Route Helpers
====================================

What:  Body validation and DbResult unwrapping used by every resource router.
How:   Both helpers raise application exceptions; global handlers in main.py
       turn them into single 400 responses.
"""

from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.database import DbResult
from app.exceptions import DatabaseError, InvalidInputError, ValidationError
from app.schemas.singer import ErrorResponse, describe_errors

M = TypeVar("M", bound=BaseModel)

# Documented error bodies for OpenAPI
ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid input or database error"},
    500: {"model": ErrorResponse, "description": "Unexpected server error"},
}


def validate_body(model: Type[M], payload: Any) -> M:
    """Validate a JSON body, reporting every failing field."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        details = describe_errors(e)
        message = "; ".join(
            f"{'.'.join(str(p) for p in d['path']) or 'body'}: {d['message']}"
            for d in details
        )
        raise ValidationError(message=message, details=details)


def validate_input(model: Type[M], payload: Any) -> M:
    """Validate a JSON body, reporting only a generic "Invalid Input"."""
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidInputError(context={"details": describe_errors(e)})


def unwrap(result: DbResult) -> Any:
    """Return the value of a successful DbResult or raise DatabaseError."""
    if not result.ok:
        raise DatabaseError(message=result.error)
    return result.value

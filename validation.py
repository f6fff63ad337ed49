"""Turn untyped request payloads into validated schema objects.

Every input schema is a pydantic model; :func:`validate` runs it and
flattens pydantic's error report into the list of ``{"field", "message"}``
entries the API returns on a 400. A schema may name the reason reported
for each field through ``__field_messages__``.
"""
import json
from typing import Any, Dict, List, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_MESSAGE = "Validation error"

# Too-long values keep pydantic's reason, it carries the limit
_GENERIC_ERROR_TYPES = {"string_too_long"}


class MalformedBody:
    """Marker for a request body that is not valid JSON."""

    def __repr__(self) -> str:
        return "<malformed body>"


MALFORMED_BODY = MalformedBody()


class ValidationError(Exception):
    """Raised when a payload does not satisfy its schema."""

    def __init__(self, message: str, errors: List[Dict[str, str]]):
        super().__init__(message)
        self.message = message
        self.errors = errors


def _field_name(loc) -> str:
    parts = [str(part) for part in loc]
    return ".".join(parts) if parts else "body"


def _error_entry(error: Dict[str, Any], messages: Dict[str, str]) -> Dict[str, str]:
    loc = error.get("loc", ())
    field = _field_name(loc)
    message = error.get("msg", "Invalid value")
    if loc and error.get("type") not in _GENERIC_ERROR_TYPES:
        message = messages.get(str(loc[0]), message)
    return {"field": field, "message": message}


def format_errors(exc, messages: Optional[Dict[str, str]] = None) -> List[Dict[str, str]]:
    """Flatten a pydantic or FastAPI error report."""
    return [_error_entry(error, messages or {}) for error in exc.errors()]


def failure_message(schema: Type[BaseModel]) -> str:
    return getattr(schema, "__failure_message__", DEFAULT_MESSAGE)


def field_messages(schema: Type[BaseModel]) -> Dict[str, str]:
    return getattr(schema, "__field_messages__", {})


def validate(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """Validate ``payload`` against ``schema``.

    Returns the populated model, or raises :class:`ValidationError` carrying
    one entry per offending field. Has no side effects.
    """
    if payload is MALFORMED_BODY:
        raise ValidationError(
            failure_message(schema),
            [{"field": "body", "message": "Request body is not valid JSON"}],
        )
    if not isinstance(payload, dict):
        raise ValidationError(
            failure_message(schema),
            [{"field": "body", "message": "Request body must be a JSON object"}],
        )
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(failure_message(schema), format_errors(exc, field_messages(schema))) from exc


async def json_body(request: Request) -> Any:
    """FastAPI dependency returning the decoded JSON body.

    Undecodable bodies come back as ``MALFORMED_BODY`` so each route reports
    them with its own schema's failure message.
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return MALFORMED_BODY


def body_schema(schema: Type[BaseModel]) -> Dict[str, Any]:
    """OpenAPI request body for a route that parses its own JSON."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        }
    }

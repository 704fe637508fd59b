"""
Typed errors raised by the drawing register services.

Callers (the HTTP layer included) can tell "your input was invalid",
"this conflicts with existing state" and "this does not exist" apart without
looking at store-specific error codes.
"""
from typing import Any, TypeVar

import pydantic

M = TypeVar("M", bound=pydantic.BaseModel)


class DrawingRegisterError(Exception):
    status_code = 500
    code = "error"

    def __init__(self, detail: str, **context: Any):
        super().__init__(detail)
        self.detail = detail
        self.context = context


class ValidationError(DrawingRegisterError):
    """Input rejected before any write."""
    status_code = 422
    code = "validation_error"


class ConflictError(DrawingRegisterError):
    status_code = 409
    code = "conflict"


class NotFoundError(DrawingRegisterError):
    status_code = 404
    code = "not_found"


class TransactionAbortError(DrawingRegisterError):
    """The store failed mid-transaction; everything was rolled back. The cause is chained."""
    status_code = 500
    code = "transaction_aborted"


def parse_payload(model: type[M], payload: M | dict[str, Any]) -> M:
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        raise ValidationError(f"Invalid {model.__name__}: {', '.join(fields)}", errors=exc.errors()) from exc

"""Guarded decoding of untrusted API response bodies."""

from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from scopeharvest.errors import DecodeError


logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

# Longest body excerpt included in decode failure logs
BODY_EXCERPT_LENGTH = 200


def safe_decode(body: bytes, model: type[ModelT], *, context: str = "") -> ModelT:
    """Decode a JSON body into a pydantic model.

    Every failure surfaces as ``DecodeError``. Faults that are not
    validation errors (deep nesting, exhausted memory, validator bugs) are
    logged with their traceback and converted as well, so a hostile body can
    never take the process down.

    Args:
        body: Raw response body.
        model: Model class describing the expected shape.
        context: Label for error messages (e.g. ``programs page 3``).

    Returns:
        Validated model instance.

    Raises:
        DecodeError: If the body is not valid JSON of the expected shape.
    """
    label = context or model.__name__
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        msg = f"JSON decode failed for {label}: {e.error_count()} error(s): {e}"
        raise DecodeError(msg, context=context) from e
    except Exception as e:  # noqa: BLE001
        logger.exception(
            "decode_fault",
            component="decode",
            context=label,
            error_type=type(e).__name__,
            body_excerpt=body[:BODY_EXCERPT_LENGTH].decode("utf-8", "replace"),
        )
        msg = f"JSON decode failed for {label}: {type(e).__name__}: {e}"
        raise DecodeError(msg, context=context) from e

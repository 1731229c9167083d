"""Validation filter for inbound product payloads."""
import logging
import math
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.errors import ValidationError
from app.models.product import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from app.schemas.product import ProductCreate

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        # Integers too large for a float cannot be stored as a price
        try:
            float(value)
        except OverflowError:
            return False
        return True
    return isinstance(value, float) and math.isfinite(value)


def _stripped(value: Any) -> Any:
    """Strings are stored trimmed; blank text counts as missing."""
    if isinstance(value, str):
        return value.strip()
    return value


def validate_product_payload(payload: Any) -> list[str]:
    """
    Check a raw product payload for presence, type, range and length rules.

    Every rule is evaluated; the caller gets all violations at once.

    Args:
        payload: Decoded JSON request body

    Returns:
        Ordered list of violation messages (empty when the payload is valid)
    """
    if not isinstance(payload, dict):
        return ["Request body must be a JSON object"]

    name = _stripped(payload.get("name"))
    description = _stripped(payload.get("description"))
    price = payload.get("price")
    category = _stripped(payload.get("category"))
    errors = []

    # Presence
    if not name:
        errors.append("Product name is required")
    if not description:
        errors.append("Product description is required")
    if price is None:
        errors.append("Product price is required")
    if not category:
        errors.append("Product category is required")

    # Types and ranges
    if name and not isinstance(name, str):
        errors.append("Product name must be a string")
    if description and not isinstance(description, str):
        errors.append("Product description must be a string")
    if price is not None:
        if not _is_number(price):
            errors.append("Product price must be a number")
        elif price < 0:
            errors.append("Product price cannot be negative")
    if category and not isinstance(category, str):
        errors.append("Product category must be a string")

    # Lengths
    if isinstance(name, str) and len(name) > NAME_MAX_LENGTH:
        errors.append(f"Product name cannot exceed {NAME_MAX_LENGTH} characters")
    if isinstance(description, str) and len(description) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            f"Product description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
        )

    return errors


def decode_product_payload(payload: Any) -> ProductCreate:
    """
    Validate a raw payload and decode it into a ProductCreate.

    Raises:
        ValidationError: if the filter or the schema decode finds problems
    """
    errors = validate_product_payload(payload)
    if errors:
        logger.warning(f"⚠️ Product validation failed: {errors}")
        raise ValidationError(errors)

    try:
        return ProductCreate.model_validate(payload)
    except PydanticValidationError as e:
        messages = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        ]
        logger.warning(f"⚠️ Product payload could not be decoded: {messages}")
        raise ValidationError(messages) from e

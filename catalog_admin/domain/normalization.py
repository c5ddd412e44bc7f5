"""Input normalization and coercion.

Write requests may arrive as multipart forms, where every value is a
string, or as JSON bodies with native types. The helpers here turn both
into the canonical values stored on entities.
"""

import json
import math
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any
from uuid import UUID

import structlog

from catalog_admin.domain.entities import QuantityOption
from catalog_admin.domain.exceptions import InvalidIdentifier, ValidationError

logger = structlog.get_logger()

# Subcategory values arrive either as a bare name or echoed back as {"name": ...}.
SubcategoryInput = str | Mapping[str, Any] | None

# Stock columns are 32-bit signed integers.
MAX_INTEGER = 2**31 - 1


class CoercionPolicy(str, Enum):
    """How optional numeric fields react to unparseable input.

    PERMISSIVE falls back to the field default; STRICT rejects the
    request with a ValidationError. Blank values use the default under
    both policies.
    """

    PERMISSIVE = "permissive"
    STRICT = "strict"


# ============================================================================
# Names and identifiers
# ============================================================================


def normalize_name(value: Any) -> str:
    """Trim and lowercase a name for storage and comparison."""
    if value is None:
        return ""
    return str(value).strip().lower()


def normalize_subcategory(value: SubcategoryInput) -> str | None:
    """Reduce a subcategory input to its bare normalized name.

    Args:
        value: Plain name, or a mapping with a "name" key.

    Returns:
        Normalized name, or None when empty.
    """
    if isinstance(value, Mapping):
        value = value.get("name")
    name = normalize_name(value)
    return name or None


def validate_identifier(value: Any, entity_type: str) -> str:
    """Check identifier format before it reaches the store.

    Args:
        value: Candidate identifier.
        entity_type: Kind of record, used in the error message.

    Returns:
        Canonical identifier string.

    Raises:
        InvalidIdentifier: If the value is not a UUID.
    """
    if not isinstance(value, str):
        raise InvalidIdentifier(entity_type, value)
    try:
        return str(UUID(value))
    except ValueError:
        raise InvalidIdentifier(entity_type, value) from None


# ============================================================================
# Booleans and numbers
# ============================================================================


def parse_bool(value: Any) -> bool:
    """Only the literal string "true" or the boolean True are truthy."""
    return value is True or value == "true"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_float(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(result):
        return None
    return result


def require_number(value: Any, field_name: str) -> float:
    """Parse a required non-negative number.

    Raises:
        ValidationError: If the value is absent, unparseable or negative.
    """
    if _is_blank(value):
        raise ValidationError(f"{field_name} is required")
    result = _to_float(value)
    if result is None:
        raise ValidationError(
            f"{field_name} must be a number",
            details={"field": field_name, "value": str(value)},
        )
    if result < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return result


def coerce_number(
    value: Any,
    field_name: str,
    policy: CoercionPolicy,
    default: float = 0,
) -> float:
    """Parse an optional non-negative number under a coercion policy."""
    if _is_blank(value):
        return default
    result = _to_float(value)
    if result is None:
        if policy is CoercionPolicy.STRICT:
            raise ValidationError(
                f"{field_name} must be a number",
                details={"field": field_name, "value": str(value)},
            )
        return default
    if result < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return result


def coerce_integer(
    value: Any,
    field_name: str,
    policy: CoercionPolicy,
    default: int = 0,
) -> int:
    """Parse an optional non-negative integer under a coercion policy.

    Permissive parsing truncates fractional input ("3.7" -> 3); strict
    parsing rejects it.
    """
    if _is_blank(value):
        return default
    result = _to_float(value)
    if result is None and policy is CoercionPolicy.PERMISSIVE:
        return default
    if result is None or (policy is CoercionPolicy.STRICT and not result.is_integer()):
        raise ValidationError(
            f"{field_name} must be an integer",
            details={"field": field_name, "value": str(value)},
        )
    if result < 0:
        raise ValidationError(f"{field_name} must not be negative")
    if result > MAX_INTEGER:
        raise ValidationError(
            f"{field_name} must not exceed {MAX_INTEGER}",
            details={"field": field_name, "value": str(value)},
        )
    return int(result)


# ============================================================================
# Quantity options
# ============================================================================


def _parse_quantity_option(item: Any, index: int, policy: CoercionPolicy) -> QuantityOption:
    prefix = f"customQuantityOptions[{index}]"
    if not isinstance(item, Mapping):
        raise ValidationError(f"{prefix} must be an object")

    amount = "" if item.get("amount") is None else str(item["amount"]).strip()
    unit = "" if item.get("unit") is None else str(item["unit"]).strip()
    if not amount:
        raise ValidationError(f"{prefix}.amount is required")
    if not unit:
        raise ValidationError(f"{prefix}.unit is required")

    return QuantityOption(
        amount=amount,
        unit=unit,
        price=require_number(item.get("price"), f"{prefix}.price"),
        stock=coerce_integer(item.get("stock"), f"{prefix}.stock", policy),
    )


def parse_quantity_options(value: Any, policy: CoercionPolicy) -> list[QuantityOption]:
    """Normalize custom quantity options to a structured list.

    Accepts a JSON-encoded string or an already structured sequence.
    Malformed JSON, or JSON that is not a list, yields an empty list.

    Args:
        value: Raw customQuantityOptions input.
        policy: Coercion policy for option stock values.

    Returns:
        Parsed quantity options, in input order.

    Raises:
        ValidationError: If an entry lacks amount/unit or has a bad price.
    """
    if _is_blank(value):
        return []

    parsed = value
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError as e:
            logger.warning("Discarding malformed quantity options", error=str(e))
            return []

    if isinstance(parsed, (str, bytes)) or not isinstance(parsed, Sequence):
        return []

    return [_parse_quantity_option(item, i, policy) for i, item in enumerate(parsed)]

"""Coercion helpers for user-supplied field values."""

import math

from nutriplan.domain.errors import ValidationError
from nutriplan.domain.models import Meal


def coerce_number(value: object, field: str, *, default: float = 0.0) -> float:
    """Convert a form value to a finite float; blank values become ``default``."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    if isinstance(value, int | float):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            raise ValidationError(f"{field} must be a number", field=field) from None
    else:
        raise ValidationError(f"{field} must be a number", field=field)
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a number", field=field)
    return number


def coerce_amount(value: object, field: str, *, default: float = 0.0) -> float:
    """Like ``coerce_number`` but rejects negative values."""
    number = coerce_number(value, field, default=default)
    if number < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    return number


def coerce_consumed(value: object) -> bool:
    if not isinstance(value, bool):
        raise ValidationError("consumed must be true or false", field="consumed")
    return value


def coerce_meal(value: object) -> Meal:
    """Return the meal bucket named by ``value``."""
    if isinstance(value, Meal):
        return value
    try:
        return Meal(str(value))
    except ValueError:
        raise ValidationError(f"Unknown meal: {value}", field="meal") from None


def coerce_name(value: object) -> str:
    """Return a stripped, non-empty food name."""
    name = str(value or "").strip()
    if not name:
        raise ValidationError("Please enter a food name", field="name")
    return name

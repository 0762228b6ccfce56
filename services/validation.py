# services/validation.py

from __future__ import annotations
import math
from typing import Any, Iterable, Optional

from services.errors import ValidationError

MAX_ID_LEN = 191
MAX_NAME_LEN = 191
MAX_DESCRIPTION_LEN = 500
# db.Integer columns are 32-bit on every backend we run on
MAX_INT = 2**31 - 1


def _is_number(val: Any) -> bool:
    # bool is an int subclass; JSON true/false is never a valid number here.
    # NaN, Infinity and overflowing literals like 1e400 are not numbers either.
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        return False
    try:
        return math.isfinite(val)
    except OverflowError:
        # int too large to convert to float
        return False


def validate_id(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    ident = value.strip()
    if len(ident) > MAX_ID_LEN:
        raise ValidationError(f"{field} is too long")
    return ident


def validate_required_string(value: Any, field: str, max_len: int = MAX_NAME_LEN) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    trimmed = value.strip()
    if len(trimmed) > max_len:
        raise ValidationError(f"{field} is too long")
    return trimmed


def validate_optional_string(value: Any, field: str, max_len: int = MAX_NAME_LEN) -> Optional[str]:
    """None stays None; a present value must be a non-blank string."""
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} cannot be empty")
    trimmed = value.strip()
    if len(trimmed) > max_len:
        raise ValidationError(f"{field} is too long")
    return trimmed


def validate_optional_int(value: Any, field: str, minimum: Optional[int] = None) -> Optional[int]:
    if value is None:
        return None
    if not _is_number(value) or int(value) != value:
        raise ValidationError(f"{field} must be an integer")
    value = int(value)
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if abs(value) > MAX_INT:
        raise ValidationError(f"{field} is out of range")
    return value


def validate_number(
    value: Any,
    field: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    exclusive_minimum: bool = False,
) -> float:
    if not _is_number(value):
        raise ValidationError(f"{field} must be a number")
    value = float(value)
    if minimum is not None:
        if exclusive_minimum and value <= minimum:
            raise ValidationError(f"{field} must be greater than {minimum:g}")
        if not exclusive_minimum and value < minimum:
            raise ValidationError(f"{field} must be at least {minimum:g}")
    if maximum is not None and value > maximum:
        raise ValidationError(f"{field} must be at most {maximum:g}")
    return value


def validate_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be a boolean")
    return value


def validate_choice(value: Any, field: str, choices: Iterable[str]) -> str:
    if not isinstance(value, str) or value not in tuple(choices):
        raise ValidationError(f"invalid {field}")
    return value

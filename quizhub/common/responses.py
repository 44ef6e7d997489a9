"""JSON envelope helpers shared by all blueprints."""
from datetime import datetime
from decimal import Decimal

from flask import jsonify, request

from quizhub.errors import ValidationError

# Signed 64-bit range accepted by every supported database
DB_INT_MIN = -2 ** 63
DB_INT_MAX = 2 ** 63 - 1


def success(data=None, status_code: int = 200, message: str | None = None):
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return jsonify(body), status_code


def get_json_body() -> dict:
    """Request JSON as a dict; anything else is a validation error."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def as_float(value: Decimal | float | None, default: float | None = 0.0) -> float | None:
    if value is None:
        return default
    return round(float(value), 2)


def text_value(value, field: str) -> str:
    """Stripped string from a JSON field; None becomes an empty string."""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip()


def parse_int(value, field: str, required: bool = True, minimum: int | None = None,
              maximum: int | None = None) -> int | None:
    """
    Coerce a JSON or query-string value to int.

    Booleans are rejected even though bool is an int subclass.
    """
    if value is None or value == '':
        if required:
            raise ValidationError(f"{field} is required")
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be an integer")
    if not DB_INT_MIN <= number <= DB_INT_MAX:
        raise ValidationError(f"{field} is out of range")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be at most {maximum}")
    return number


def parse_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')

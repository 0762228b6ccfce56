from flask import Blueprint, request

from services.errors import ValidationError

# single JSON blueprint for everything except auth (has its own) and debug
api_bp = Blueprint("api", __name__)


def json_body():
    """Parsed JSON request body; malformed or missing JSON is a 400."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("invalid JSON")
    return payload


# route modules register themselves on api_bp, hence the noqa: F401
from . import programs   # noqa: F401
from . import subjects   # noqa: F401
from . import electives  # noqa: F401
from . import progress   # noqa: F401

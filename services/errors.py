"""Error taxonomy shared by the services.

Routes never build error bodies themselves: services raise one of these and
``routes/errors.py`` renders ``{"ok": false, "error": message}`` with
``status_code``.
"""

from __future__ import annotations
from typing import Optional


class CurriculumError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CurriculumError):
    """Malformed or out-of-range input. Caller-fixable."""

    status_code = 400


class ReferentialError(CurriculumError):
    """A referenced subject / program / pool is missing or has the wrong parent.

    404 when the reference is the resource in the URL, 400 when it came from
    the request body.
    """

    status_code = 404


class AuthorizationError(CurriculumError):
    status_code = 403


class ConflictError(CurriculumError):
    status_code = 409


class StoreError(CurriculumError):
    """Persistence failure. The message is opaque; details go to the log."""

    status_code = 500

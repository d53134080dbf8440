"""
Typed failures raised by the repository layer.

Routes never catch these; main.py maps each class to one HTTP status.
"""

from __future__ import annotations


class InventHubError(Exception):
    """Base class for all expected application failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(InventHubError):
    """Lookup by id found nothing."""

    status_code = 404


class ForbiddenError(InventHubError):
    """Caller lacks the role the operation requires."""

    status_code = 403


class ValidationError(InventHubError):
    """Input is malformed, e.g. a blank comment or an unknown status."""

    status_code = 400


class DataIntegrityError(InventHubError):
    """
    Stored data violates an invariant the schema should guarantee,
    e.g. two like rows for one (invention, user) pair. Fatal, never retried.
    """

    status_code = 500

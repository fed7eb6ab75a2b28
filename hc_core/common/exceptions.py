"""
common/exceptions.py
====================
Domain exceptions shared by every workflow service.

Service layer raises these. The API exception handler maps them to the
standard error envelope, so views never translate errors by hand.
"""
from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """
    Base exception for business-rule and store failures.
    Carries a human-readable message, a machine-readable code and the HTTP
    status the API layer should answer with.
    """
    code = "error"
    http_status = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None, *, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Unauthorized(DomainError):
    """Missing identity, tenant mismatch, wrong role, or not the assigned actor."""
    code = "unauthorized"
    http_status = 403
    default_message = "You are not allowed to perform this action."


class NotFound(DomainError):
    """Referenced Shift, Visit or Patient does not exist."""
    code = "not_found"
    http_status = 404
    default_message = "Resource not found."


class InvalidStateTransition(DomainError):
    """
    Current status is not a valid source for the requested event.
    Also raised when a conditional write loses a race (stale read).
    """
    code = "invalid_state_transition"
    http_status = 409
    default_message = "Invalid state transition."


class ValidationError(DomainError):
    """A required field is blank or malformed."""
    code = "validation_error"
    http_status = 400
    default_message = "Validation failed."


class DuplicateResource(DomainError):
    """A record with the same identity already exists (e.g. Visit for a Shift)."""
    code = "duplicate_resource"
    http_status = 409
    default_message = "Resource already exists."


class PersistenceError(DomainError):
    """The store is unavailable or rejected a write for non-business reasons."""
    code = "persistence_error"
    http_status = 503
    default_message = "The data store is unavailable. Try again later."

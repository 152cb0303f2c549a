"""
Domain exceptions for the docshare backend.

Every use case surfaces exactly one of these per failed call; the API layer
maps each class to an HTTP status code.
"""
from __future__ import annotations

from typing import Any


class DocShareError(Exception):
    """Base exception for all docshare errors."""

    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class BadRequestError(DocShareError):
    """Malformed or invalid caller input."""

    status_code = 400


class UnauthorizedError(DocShareError):
    """No verified caller identity."""

    status_code = 401


class ForbiddenError(DocShareError):
    """Caller is not allowed to act on the resource."""

    status_code = 403


class NotFoundError(DocShareError):
    """Referenced entity, or required path segment, is absent."""

    status_code = 404


class ConflictError(DocShareError):
    """Uniqueness constraint violated (e.g. duplicate email)."""

    status_code = 409


class InternalError(DocShareError):
    """Store failure or unexpected internal condition."""

    status_code = 500

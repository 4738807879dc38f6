# Overview: Error taxonomy and the Flask handlers that render it.

"""
Every domain error carries the HTTP status it maps to. Services raise them and
let them propagate; register_error_handlers() turns them into the same JSON
envelope successes use.

    NotFoundError             404  referenced Product/Supplier/Transaction/User missing
    MissingReferenceError     400  a required reference (supplier) was not supplied
    InvalidCredentialsError   400  login password mismatch (kept at 400, not 401)
    AuthenticationError       401  no/invalid/expired identity on a protected route
    AuthorizationError        403  identity lacks the required role
    InsufficientStockError    409  movement would leave stock below zero
    StatusTransitionError     409  disallowed status change (strict mode only)
    anything else             500
"""

from __future__ import annotations

from flask import current_app
from werkzeug.exceptions import HTTPException

from .responses import envelope


class ApiError(Exception):
    """Base class for errors that are rendered as an envelope."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ApiError):
    status_code = 404


class MissingReferenceError(ApiError):
    status_code = 400


class InvalidCredentialsError(ApiError):
    status_code = 400


class AuthenticationError(ApiError):
    status_code = 401


class AuthorizationError(ApiError):
    status_code = 403


class InsufficientStockError(ApiError):
    status_code = 409


class StatusTransitionError(ApiError):
    status_code = 409


def register_error_handlers(app) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(exc: ApiError):
        if exc.status_code >= 500:
            current_app.logger.error("Request failed: %s", exc.message)
        return envelope(exc.status_code, exc.message)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return envelope(exc.code or 500, exc.description or exc.name)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        current_app.logger.exception("Unhandled error")
        if current_app.config.get("EXPOSE_INTERNAL_ERRORS", True):
            message = str(exc) or exc.__class__.__name__
        else:
            message = "Internal server error"
        return envelope(500, message)

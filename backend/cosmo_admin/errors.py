# Overview: Exception taxonomy shared by services and routes, and its JSON mapping.

from __future__ import annotations

from flask import Flask, current_app, jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .extensions import db


class APIError(Exception):
    """Base class for errors that map directly onto an HTTP status."""
    status_code = 500

    def __init__(self, message: str, *, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class AuthenticationError(APIError):
    """Missing, malformed, expired or otherwise unverifiable credential."""
    status_code = 401


class AuthorizationError(APIError):
    """Valid credential, insufficient role."""
    status_code = 403


class ValidationError(APIError):
    """400-level input problem."""
    status_code = 400


class NotFoundError(APIError):
    status_code = 404


class ConflictError(APIError):
    """409-level constraint conflict (duplicate email, product still on an order)."""
    status_code = 409


class PersistenceError(APIError):
    """A multi-statement write failed and was rolled back."""
    status_code = 500


FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _driver_code(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_foreign_key_violation(exc: SQLAlchemyError) -> bool:
    if _driver_code(exc) == FOREIGN_KEY_VIOLATION:
        return True
    return "FOREIGN KEY constraint failed" in str(getattr(exc, "orig", exc))


def is_unique_violation(exc: SQLAlchemyError) -> bool:
    if _driver_code(exc) == UNIQUE_VIOLATION:
        return True
    return "UNIQUE constraint failed" in str(getattr(exc, "orig", exc))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(APIError)
    def handle_api_error(exc: APIError):
        if exc.status_code >= 500:
            current_app.logger.error("%s: %s", type(exc).__name__, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(exc: IntegrityError):
        db.session.rollback()
        current_app.logger.warning("Integrity error: %s", exc.orig)
        return jsonify({"error": "Constraint violation", "details": str(exc.orig)}), 409

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Unhandled database error")
        return jsonify({"error": "Database error", "details": str(getattr(exc, "orig", exc))}), 500

    @app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return jsonify({"error": "Method Not Allowed"}), 405

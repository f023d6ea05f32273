# --- academy/utils/errors.py ---
from __future__ import annotations

import enum
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from .api import api_error

log = logging.getLogger(__name__)


class ErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"


# kind -> transport status, applied only at the HTTP boundary
HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFLICT: 409,
}


class CommerceError(Exception):
    """A client-correctable failure tagged with its kind."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self):
        return f"CommerceError({self.kind.name}, {self.message!r})"


def not_found(message="resource not found") -> CommerceError:
    return CommerceError(ErrorKind.NOT_FOUND, message)

def validation(message) -> CommerceError:
    return CommerceError(ErrorKind.VALIDATION, message)

def conflict(message="conflict with current state") -> CommerceError:
    return CommerceError(ErrorKind.CONFLICT, message)


def register_error_handlers(app):
    @app.errorhandler(CommerceError)
    def handle_commerce_error(e: CommerceError):
        r = jsonify(api_error(e.message, {"kind": e.kind.value}))
        r.status_code = HTTP_STATUS[e.kind]
        return r

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        r = jsonify(api_error(e.description or e.name))
        r.status_code = e.code or 500
        return r

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        log.exception("unhandled error: %s", e)
        r = jsonify(api_error("internal server error"))
        r.status_code = 500
        return r


def register_jwt_handlers(jwt):
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify(api_error(reason)), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify(api_error(reason)), 401

    @jwt.expired_token_loader
    def _expired_token(jwt_header, jwt_payload):
        return jsonify(api_error("token has expired")), 401

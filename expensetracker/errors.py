import logging
import traceback

from flask import current_app, jsonify, request
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from .extensions import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for errors that are reported to the client."""

    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message=None, errors=None):
        self.message = message or self.default_message
        self.errors = errors or []
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request data"


class AuthError(ApiError):
    status_code = 401
    default_message = "Not authorized"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = 400
    default_message = "Request conflicts with existing data"


class ServerError(ApiError):
    status_code = 500


def error_response(err: ApiError, detail=None):
    body = {"success": False, "message": err.message, "error": detail or type(err).__name__}
    if err.errors:
        body["errors"] = err.errors
    return jsonify(body), err.status_code


def _show_details() -> bool:
    return current_app.config.get("APP_ENV") != "production"


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, err.message)
        return error_response(err)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err):
        db.session.rollback()
        logger.warning("Integrity error on %s %s: %s", request.method, request.path, err.orig)
        return error_response(ConflictError())

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        if err.code == 404:
            return jsonify({"success": False, "message": "Endpoint not found", "path": request.path}), 404
        return jsonify({"success": False, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        db.session.rollback()
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        detail = None
        if _show_details():
            detail = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        return error_response(ServerError(), detail)

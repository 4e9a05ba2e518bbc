"""
API error taxonomy and the Flask handlers that render it.

Every error reaches the client as {"error": <code>, "message": <text>}.
"""

import logging
from typing import Optional, Tuple

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status = 500
    code = "internal_error"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_response(self) -> Tuple[Response, int]:
        return jsonify({"error": self.code, "message": self.message}), self.status


class BadRequest(ApiError):
    status = 400
    code = "bad_request"
    message = "Bad request"


class InvalidCredentials(ApiError):
    # Unknown user and wrong password share this error on purpose.
    status = 400
    code = "invalid_credentials"
    message = "Invalid credentials"


class InvalidToken(ApiError):
    # Missing, malformed, expired and forged tokens all look the same.
    status = 401
    code = "invalid_token"
    message = "Invalid token"


class NotFound(ApiError):
    status = 404
    code = "not_found"
    message = "Not found"


class InternalError(ApiError):
    pass


class ConfigurationError(InternalError):
    code = "configuration_error"
    message = "Configuration error"


def register_error_handlers(app: Flask) -> None:
    """
    Attach JSON error handlers to the app.

    Unhandled exceptions are logged with their traceback and rendered as a
    generic InternalError; details never leave the server.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return error.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        return jsonify({
            "error": (error.name or "error").lower().replace(" ", "_"),
            "message": error.description,
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception(f"Unhandled error: {error}")
        return InternalError().to_response()

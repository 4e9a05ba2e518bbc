"""
Authentication service route handlers.

Provides the single login route. Users are created out of band,
so there is no registration endpoint.

All JWT logic is delegated to `auth_service.utils`.
"""

import logging
from typing import Any, Dict, Tuple

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from flask import Blueprint, Response, current_app, jsonify, request

from backend.auth_service.utils import create_token
from backend.shared.errors import ApiError, BadRequest, InternalError, InvalidCredentials

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)
ph = PasswordHasher()


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - username (str)
    - password (str)

    Returns:
        200: JSON with the token.
        400: Missing fields, or invalid credentials (unknown user and wrong
             password are reported identically).
        500: Missing JWT secret or database error.
    """
    data: Dict[str, Any] = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        data = {}
    username = data.get("username")
    password = data.get("password")

    if not username or not password:
        return BadRequest("Username and password are required").to_response()

    settings = current_app.config["SETTINGS"]
    users = current_app.extensions["database"].users

    try:
        user = users.find_unique(username=username)
        if user is None:
            raise InvalidCredentials()

        try:
            ph.verify(user.password, password)
        except (VerificationError, InvalidHashError):
            raise InvalidCredentials()

        token = create_token(user.id, settings.jwt_secret, settings.token_expiration)
    except ApiError as e:
        return e.to_response()
    except Exception:
        logger.exception("Error during log in")
        return InternalError("Internal server error (login)").to_response()

    return jsonify({"token": token}), 200

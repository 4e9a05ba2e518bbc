"""
Shared authentication helpers.
Provides token creation, verification, and the bearer-token guard.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional

import jwt
from flask import current_app, g, request

from backend.config import TOKEN_EXPIRATION
from backend.shared.errors import ConfigurationError, InvalidToken

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


# --- JWT CREATION ---
def create_token(user_id: Any, secret: Optional[str], expires_in: timedelta = TOKEN_EXPIRATION) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id: The unique ID of the user. The token's only custom claim.
        secret (str): Signing secret from the app settings.
        expires_in (timedelta): Token lifetime. One hour by default.

    Returns:
        str: Encoded JWT string.

    Raises:
        ConfigurationError: If no secret is configured.
    """
    if not secret:
        logger.error("JWT_SECRET not set; refusing to sign token")
        raise ConfigurationError()

    now = datetime.now(timezone.utc)

    payload = {
        "userId": user_id,
        "iat": now,
        "exp": now + expires_in,
    }

    return jwt.encode(payload, secret, algorithm=ALGORITHM)


# --- JWT VALIDATION ---
def verify_token(token: str, secret: Optional[str]) -> Dict[str, Any]:
    """
    Validate a JWT and return its claims.

    Expired, malformed and forged tokens all raise the same error, and so
    does a missing secret.

    Raises:
        InvalidToken: If the token cannot be trusted.
    """
    if not secret:
        logger.error("FATAL ERROR: JWT_SECRET is not defined; rejecting token")
        raise InvalidToken()

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp", "iat", "userId"]},
        )
    except jwt.PyJWTError as e:
        logger.info(f"Token verification failed: {e}")
        raise InvalidToken() from e

    return payload


def extract_bearer_token(header: Optional[str]) -> str:
    """Pull the token out of an 'Authorization: Bearer <token>' value."""
    scheme, _, token = (header or "").partition(" ")
    if scheme != "Bearer" or not token or any(c.isspace() for c in token):
        raise InvalidToken()
    return token


def token_required(view: Callable) -> Callable:
    """
    Guard a view behind a valid bearer token.

    On success the caller's identity is stored in g.user as {"userId": ...}.
    Otherwise the request ends with 401 and the view is never called.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        settings = current_app.config["SETTINGS"]
        try:
            token = extract_bearer_token(request.headers.get("Authorization"))
            payload = verify_token(token, settings.jwt_secret)
        except InvalidToken as e:
            return e.to_response()

        g.user = {"userId": payload["userId"]}
        return view(*args, **kwargs)

    return wrapper

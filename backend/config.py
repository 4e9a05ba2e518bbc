"""
Process-wide configuration.
Loaded once at startup and handed to the app; nothing else reads the environment.
"""

import logging
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

TOKEN_EXPIRATION = timedelta(hours=1)
DEFAULT_PORT = 3001

# APP_MODE -> environment variable holding the allowed CORS origin
ORIGIN_VARIABLES = {
    "vercel": "ALLOWED_ORIGIN_VERCEL",
    "production": "ALLOWED_ORIGIN_PROD",
    "dev": "ALLOWED_ORIGIN_DEV",
}


@dataclass(frozen=True)
class Settings:
    jwt_secret: Optional[str] = None
    app_mode: str = "dev"
    allowed_origin: Optional[str] = None
    database_url: Optional[str] = None
    port: int = DEFAULT_PORT
    token_expiration: timedelta = TOKEN_EXPIRATION


def resolve_allowed_origin(app_mode: Optional[str], env: Mapping[str, str]) -> Optional[str]:
    """
    Pick the CORS origin for a deployment mode.

    Unknown or missing modes fall back to the dev origin.

    Returns:
        str: The origin, or None if the selected variable is unset.
    """
    variable = ORIGIN_VARIABLES.get(app_mode or "dev", ORIGIN_VARIABLES["dev"])
    return env.get(variable) or None


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment (and .env, if present).

    A missing JWT_SECRET is logged but does not stop startup; the auth
    layer refuses to verify or sign tokens without it.

    Args:
        env (Mapping, optional): Source of variables. Defaults to os.environ.

    Returns:
        Settings: Immutable configuration.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    app_mode = env.get("APP_MODE") or "dev"

    jwt_secret = env.get("JWT_SECRET") or None
    if not jwt_secret:
        logger.error("FATAL ERROR: JWT_SECRET is not defined. Check your .env file.")

    allowed_origin = resolve_allowed_origin(app_mode, env)

    return Settings(
        jwt_secret=jwt_secret,
        app_mode=app_mode,
        allowed_origin=allowed_origin,
        database_url=env.get("DATABASE_URL") or None,
        port=int(env.get("PORT") or DEFAULT_PORT),
    )

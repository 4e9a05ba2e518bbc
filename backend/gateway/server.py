"""
API gateway: combines the auth and events blueprints.
This is the entrypoint for local development and deployment.
"""

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from backend.auth_service.routes import auth_bp
from backend.config import Settings, load_settings
from backend.database.queries import Database
from backend.events_service.routes import events_bp
from backend.shared.errors import register_error_handlers

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, database=None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings (Settings, optional): Configuration. Loaded from the
            environment when omitted.
        database (optional): Object exposing `events` and `users` tables.
            Built from settings.database_url when omitted.

    Returns:
        Flask: The configured Flask application.
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    app.extensions["database"] = database if database is not None else Database(settings.database_url)

    cors_options = {
        "methods": ["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        "allow_headers": ["Content-Type", "Authorization"],
    }

    # One allowed origin per deployment mode
    if settings.allowed_origin:
        cors_options.update(origins=settings.allowed_origin, supports_credentials=True)
    else:
        logger.warning(f"No CORS origin configured for APP_MODE '{settings.app_mode}'; origins are unrestricted")
        # literal "*", no credentials
        cors_options.update(origins="*", send_wildcard=True)

    CORS(app, resources={r"/api/*": cors_options})

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(events_bp, url_prefix="/api/events")
    register_error_handlers(app)

    # --- REQUEST LOGGING ---
    @app.before_request
    def log_request() -> None:
        logger.info(f"Incoming {request.method} {request.path}")

    @app.after_request
    def log_response(response: Response) -> Response:
        logger.info(f"Response {request.method} {request.path} {response.status}")
        return response

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


def main() -> None:
    settings = load_settings()
    app = create_app(settings)

    logger.info(f"Backend server running on http://localhost:{settings.port} in {settings.app_mode} mode")
    if settings.allowed_origin:
        logger.info(f"Allowed frontend origin for CORS: {settings.allowed_origin}")

    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

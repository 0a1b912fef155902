"""Application factory."""

import atexit
import os
import uuid

from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import Config
from models import db
from notifications import MailDispatcher, build_notifier
from routes.auth import auth_bp
from routes.medications import medications_bp
from routes.symptoms import symptoms_bp
from routes.users import users_bp
from routes.wellness import wellness_bp
from utils.auth import register_token_handlers
from utils.errors import json_error

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

register_token_handlers(jwt)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "60 per minute")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Email
    mailer = MailDispatcher(
        build_notifier(app.config),
        run_async=app.config.get("MAIL_ASYNC", True),
        max_workers=app.config.get("MAIL_WORKERS", 2),
    )
    app.extensions["mailer"] = mailer
    atexit.register(mailer.shutdown, wait=False)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(users_bp, url_prefix="/auth/users")
    app.register_blueprint(symptoms_bp, url_prefix="/symptoms")
    app.register_blueprint(medications_bp, url_prefix="/medications")
    app.register_blueprint(wellness_bp, url_prefix="/wellness")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        app.logger.info(
            "%s %s %s request_id=%s",
            request.method,
            request.path,
            response.status_code,
            request_id,
        )
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        response = json_error(
            error.code or 500,
            getattr(error, "name", "Error"),
            error.description,
            **getattr(error, "extra", {}),
        )
        # Keep Retry-After, Allow and similar headers set by the exception.
        for header, value in error.get_headers():
            if header.lower() != "content-type":
                response.headers.setdefault(header, value)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        if app.config.get("APP_ENV") == "production":
            message = "An unexpected error occurred."
        else:
            message = str(error) or error.__class__.__name__
        return json_error(500, "Internal Server Error", message)


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))

"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with blueprints, error handlers, the Cognito services
and configuration.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from cognito_admin.config import AppConfig, load_settings
from cognito_admin.core.cognito import CognitoClient, GroupService, UserService, create_boto3_client

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(config: Optional[AppConfig] = None, cognito_client: Optional[CognitoClient] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Settings (loaded from the environment when omitted)
        cognito_client: Pool-bound Cognito client (built from config when omitted)
    """
    cfg = config or load_settings()
    _configure_logging(cfg.log_level)

    app = Flask(__name__)

    # Store config for easy access in routes
    app.config["APP_CONFIG"] = cfg

    # Trust X-Forwarded-* headers from proxy (Location headers use the public host)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore

    # One boto3 client per app; low-level clients are thread-safe
    if cognito_client is None:
        cognito_client = CognitoClient(create_boto3_client(cfg), cfg.cognito_user_pool_id)
    app.extensions["cognito_client"] = cognito_client
    app.extensions["user_service"] = UserService(cognito_client, cfg)
    app.extensions["group_service"] = GroupService(cognito_client, cfg)

    # Register blueprints
    from cognito_admin.api import docs, errors, groups, health, users

    app.register_blueprint(health.bp)
    app.register_blueprint(docs.bp)
    app.register_blueprint(users.bp)
    app.register_blueprint(groups.bp)

    # Register error handlers
    errors.register_error_handlers(app)

    mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
    logger.info("[flask_app] Mode=%s; admin API registered at /api/users and /api/groups", mode_label)
    if not cfg.auth_enabled:
        logger.warning("[flask_app] API_AUTH_ENABLED=false - admin endpoints are not authenticated")

    return app


def _configure_logging(level: str) -> None:
    """Configure root logging once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT)
    numeric_level = logging.getLevelName(level)
    root.setLevel(numeric_level if isinstance(numeric_level, int) else logging.INFO)


# ─────────────────────────────────────────────────────────────────────────────
# Application Instance (for Gunicorn)
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)

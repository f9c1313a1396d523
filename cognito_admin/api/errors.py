"""Error handlers for the application."""
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from ..core.errors import ApiError, AuthenticationError

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def problem_response(error: ApiError):
    """Render an ApiError as an application/problem+json response."""
    response = jsonify(error.to_dict())
    response.status_code = error.status
    response.mimetype = PROBLEM_JSON
    if isinstance(error, AuthenticationError):
        response.headers["WWW-Authenticate"] = 'Bearer realm="cognito-admin-api"'
    return response


class _HttpProblem(ApiError):
    """Problem body for framework errors (unknown route, wrong method...)."""

    def __init__(self, exc: HTTPException):
        self.status = exc.code or 500
        self.title = exc.name
        self.category = exc.name.upper().replace(" ", "_")
        self.type_slug = exc.name.lower().replace(" ", "-")
        super().__init__(exc.description or exc.name)


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        """Handle typed API errors (validation, not found, Cognito, auth)."""
        if error.status >= 500:
            logger.error("API error: %s", error.detail)
        else:
            logger.info("API error %s: %s", error.status, error.detail)
        return problem_response(error)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        """Handle 404/405 and other werkzeug HTTP errors as problem+json."""
        return problem_response(_HttpProblem(error))

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        logger.error("Unhandled exception: %s", error, exc_info=True)
        return problem_response(ApiError("An unexpected error occurred"))

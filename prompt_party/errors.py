"""Custom exception classes and Flask error handlers."""
import logging
from typing import Any

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error with a machine-readable code and HTTP status."""

    def __init__(self, code: str, message: str, status: int = 400) -> None:
        """Initialise the error.

        Args:
            code: Machine-readable error code.
            message: Human-readable description, sent to clients as ``error``.
            status: HTTP status code.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status


class ValidationError(AppError):
    """Raised when request data is missing or malformed."""

    def __init__(self, message: str) -> None:
        super().__init__("VALIDATION_ERROR", message, 400)


class Conflict(AppError):
    """Raised when an action clashes with the current game state."""

    def __init__(self, message: str, code: str = "CONFLICT") -> None:
        super().__init__(code, message, 400)


class DuplicateSubmissionError(Conflict):
    """Raised when a player submits a second prompt for the same round or chain."""

    def __init__(self, message: str = "Player has already submitted a prompt") -> None:
        super().__init__(message, code="DUPLICATE_SUBMISSION")


class ChainNotFoundError(AppError):
    """Raised when no prompt chain exists at the computed chain index."""

    def __init__(self) -> None:
        super().__init__("CHAIN_NOT_FOUND", "No prompt chain found for this round", 400)


class PermissionDenied(AppError):
    """Raised when a player tries an action they are not permitted to perform."""

    def __init__(self, message: str = "You are not permitted to perform this action") -> None:
        super().__init__("PERMISSION_DENIED", message, 403)


class NotFound(AppError):
    """Raised when a requested record does not exist."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__("NOT_FOUND", message, 404)


class GameNotFoundError(NotFound):
    """Raised when a game with the given room id does not exist."""

    def __init__(self) -> None:
        super().__init__("Game not found")


class PlayerNotFoundError(NotFound):
    """Raised when a player is not part of the game."""

    def __init__(self, message: str = "Player not found in game") -> None:
        super().__init__(message)


class UpstreamFailure(AppError):
    """Raised when the image-generation service fails."""

    def __init__(self, message: str = "Failed to generate image") -> None:
        super().__init__("UPSTREAM_FAILURE", message, 500)


class InternalError(AppError):
    """Raised for persistence failures and other unexpected conditions."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__("INTERNAL_ERROR", message, 500)


def register_error_handlers(app: Any) -> None:
    """Register error handlers on the Flask app.

    Every error body has the shape ``{"error": <message>, "code": <CODE>}``.

    Args:
        app: The Flask application instance.
    """
    from .extensions import db

    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status >= 500:
            logger.error("%s: %s", err.code, err.message)
        return jsonify({"error": err.message, "code": err.code}), err.status

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"error": "The requested resource was not found", "code": "NOT_FOUND"}), 404

    @app.errorhandler(405)
    def handle_405(err):
        return jsonify({"error": "Method not allowed", "code": "METHOD_NOT_ALLOWED"}), 405

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        if isinstance(err, HTTPException):
            code = (err.name or "HTTP_ERROR").upper().replace(" ", "_")
            return jsonify({"error": err.description, "code": code}), err.code
        db.session.rollback()
        logger.exception("Unhandled error")
        internal = InternalError()
        return jsonify({"error": internal.message, "code": internal.code}), internal.status

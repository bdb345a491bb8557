"""Application factory."""
import logging
import os

from flask import Flask, request

from .config import config_map
from .extensions import db, migrate, socketio, cors
from .errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(env: str | None = None, image_generator=None) -> Flask:
    """Create and configure the Flask application.

    Args:
        env: Configuration environment name. Defaults to FLASK_ENV env var.
        image_generator: Optional object with a ``generate(prompt) -> url``
            method. Defaults to an OpenAI-compatible HTTP generator built
            from the app config.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    env = env or os.environ.get("FLASK_ENV", "default")
    app.config.from_object(config_map.get(env, config_map["default"]))

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # Initialise extensions
    db.init_app(app)
    migrate.init_app(app, db)
    # Register socket handlers before socketio.init_app so every server instance gets them
    from .sockets import register_handlers
    register_handlers()

    cors_origins = app.config["CORS_ORIGINS"]
    cors.init_app(app, resources={r"/*": {"origins": cors_origins}})
    socketio.init_app(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
        logger=False,
        engineio_logger=False,
    )

    if image_generator is None:
        from .services.image_generator import OpenAIImageGenerator
        image_generator = OpenAIImageGenerator.from_config(app.config)
    app.extensions["image_generator"] = image_generator

    # Import models so Alembic can detect them
    with app.app_context():
        from .models import game, player, player_game, image, prompt_chain, vote  # noqa: F401

        # Auto-create tables if they don't exist (e.g. fresh SQLite volume)
        db.create_all()

    @app.before_request
    def log_request() -> None:
        logger.info("%s %s", request.method, request.path)

    # Register blueprints
    from .api import register_blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    return app

"""API blueprint registration."""
from flask import Flask, jsonify


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints on the app.

    Args:
        app: The Flask application instance.
    """
    from .games import games_bp
    from .players import players_bp
    app.register_blueprint(games_bp, url_prefix="/api")
    app.register_blueprint(players_bp, url_prefix="/api")

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"}), 200

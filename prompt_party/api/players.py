"""/api/players/* REST routes."""
from flask import Blueprint, request, jsonify
from ..services import game_service

players_bp = Blueprint("players", __name__)


@players_bp.route("/players/<player_id>/games", methods=["GET"])
def player_games(player_id: str):
    """GET /api/players/<player_id>/games — the player's game history, newest first.

    Query params ``status`` (``complete`` or ``in-progress``) and ``gameMode``
    narrow the list.
    """
    history = game_service.player_history(
        player_id,
        status=request.args.get("status"),
        game_mode=request.args.get("gameMode"),
    )
    return jsonify(history), 200

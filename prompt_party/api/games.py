"""All /api/games/* REST routes."""
from flask import Blueprint, request, jsonify
from ..services import (
    game_service,
    image_service,
    round_service,
    submission_service,
    vote_service,
)
from ..services.game_service import get_game_or_404
from ..services.state_service import build_game_snapshot
from ..sockets.emitters import emit_game_state

games_bp = Blueprint("games", __name__)


def _json_body() -> dict:
    return request.get_json(force=True, silent=True) or {}


# ---------------------------------------------------------------------------
# Create / fetch game
# ---------------------------------------------------------------------------

@games_bp.route("/games", methods=["POST"])
def create_game():
    """POST /api/games — create a new game with the caller as host."""
    data = _json_body()
    game = game_service.create_game(
        player_name=data.get("playerName"),
        room_id=data.get("roomId"),
        player_id=data.get("playerId"),
        game_mode=data.get("gameMode"),
        max_rounds=data.get("maxRounds"),
        email=data.get("email"),
    )
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>", methods=["GET"])
def get_game(room_id: str):
    """GET /api/games/<room_id> — full game snapshot.

    Ends an expired prompt or voting phase before answering.
    """
    game = get_game_or_404(room_id)
    if round_service.enforce_deadline(game):
        emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


# ---------------------------------------------------------------------------
# Lobby
# ---------------------------------------------------------------------------

@games_bp.route("/games/<room_id>/players", methods=["POST"])
def add_player(room_id: str):
    """POST /api/games/<room_id>/players — join a lobby game."""
    game = get_game_or_404(room_id)
    data = _json_body()
    game_service.add_player(game, data.get("name"), player_id=data.get("playerId"))
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/start", methods=["POST"])
def start_game(room_id: str):
    """POST /api/games/<room_id>/start — host moves the lobby into round 1."""
    game = get_game_or_404(room_id)
    data = _json_body()
    round_service.start_game(game, data.get("playerId"))
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


# ---------------------------------------------------------------------------
# Prompt phase
# ---------------------------------------------------------------------------

@games_bp.route("/games/<room_id>/prompts", methods=["POST"])
def submit_prompt(room_id: str):
    """POST /api/games/<room_id>/prompts — submit a prompt for this round."""
    game = get_game_or_404(room_id)
    data = _json_body()
    submission_service.submit_prompt(game, data.get("playerId"), data.get("prompt"))
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/auto-submit", methods=["POST"])
def auto_submit(room_id: str):
    """POST /api/games/<room_id>/auto-submit — submit whatever the client had when its timer ran out."""
    game = get_game_or_404(room_id)
    data = _json_body()
    submission_service.submit_prompt(game, data.get("playerId"), data.get("prompt"), auto=True)
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/generate-image", methods=["POST"])
def generate_image(room_id: str):
    """POST /api/games/<room_id>/generate-image — generate the player's pending image."""
    game = get_game_or_404(room_id)
    data = _json_body()
    image_service.generate_image(game, data.get("playerId"), data.get("prompt"))
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/round/status", methods=["GET"])
def round_status(room_id: str):
    """GET /api/games/<room_id>/round/status — prompt-phase progress for polling clients."""
    game = get_game_or_404(room_id)
    status = round_service.round_status(game, request.args.get("playerId"))
    if round_service.enforce_deadline(game):
        emit_game_state(game)
    return jsonify(status), 200


@games_bp.route("/games/<room_id>/end-round", methods=["POST"])
def end_round(room_id: str):
    """POST /api/games/<room_id>/end-round — close the prompt phase. Safe to repeat."""
    game = get_game_or_404(room_id)
    if round_service.end_round(game):
        emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/next-round", methods=["POST"])
def next_round(room_id: str):
    """POST /api/games/<room_id>/next-round — host starts the next round."""
    game = get_game_or_404(room_id)
    data = _json_body()
    if round_service.next_round(game, data.get("playerId")):
        emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


# ---------------------------------------------------------------------------
# Voting
# ---------------------------------------------------------------------------

@games_bp.route("/games/<room_id>/votes", methods=["POST"])
def cast_vote(room_id: str):
    """POST /api/games/<room_id>/votes — vote for an image; replaces an earlier vote."""
    game = get_game_or_404(room_id)
    data = _json_body()
    vote_service.cast_vote(game, data.get("voterId"), data.get("imageId"))
    emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200


@games_bp.route("/games/<room_id>/votes/status", methods=["GET"])
def voting_status(room_id: str):
    """GET /api/games/<room_id>/votes/status — voting progress for polling clients."""
    game = get_game_or_404(room_id)
    status = vote_service.voting_status(game, request.args.get("voterId"))
    if round_service.enforce_deadline(game):
        emit_game_state(game)
    return jsonify(status), 200


@games_bp.route("/games/<room_id>/end-voting", methods=["POST"])
def end_voting(room_id: str):
    """POST /api/games/<room_id>/end-voting — close voting and tally scores. Safe to repeat."""
    game = get_game_or_404(room_id)
    if vote_service.end_voting(game):
        emit_game_state(game)
    return jsonify(build_game_snapshot(game)), 200

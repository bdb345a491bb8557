"""Socket.IO emitter helpers: the only place that calls socketio.emit()."""
from ..extensions import socketio
from ..models.game import Game


def emit_game_state(game: Game) -> None:
    """Broadcast the full game snapshot to all clients in the game's room.

    Args:
        game: The Game instance.
    """
    from ..services.state_service import build_game_snapshot
    payload = build_game_snapshot(game)
    socketio.emit("game_state_updated", payload, to=game.room_id)

"""Socket.IO event handlers."""
import logging
from flask_socketio import join_room, leave_room, emit
from ..extensions import db, socketio
from ..models.game import Game

logger = logging.getLogger(__name__)


def _lookup(data: dict) -> tuple[Game | None, str]:
    room_id = (data or {}).get("roomId") or ""
    player_id = (data or {}).get("playerId") or ""
    if not room_id or not player_id:
        return None, player_id
    game = db.session.execute(
        db.select(Game).where(Game.room_id == room_id)
    ).scalar_one_or_none()
    return game, player_id


@socketio.on("join_game_room")
def handle_join_game_room(data: dict) -> None:
    """Subscribe a member's socket to their game's broadcasts.

    Sends the current snapshot to the joining socket so a refreshed page
    catches up immediately.

    Args:
        data: Dict containing roomId and playerId.
    """
    game, player_id = _lookup(data)
    if game is None or game.membership(player_id) is None:
        return

    from ..services.state_service import build_game_snapshot
    join_room(game.room_id)
    logger.info("Socket for %s joined room %s", player_id, game.room_id)
    emit("game_state_updated", build_game_snapshot(game))


@socketio.on("leave_game_room")
def handle_leave_game_room(data: dict) -> None:
    """Unsubscribe a socket from a game's broadcasts.

    Args:
        data: Dict containing roomId and playerId.
    """
    game, player_id = _lookup(data)
    if game is None:
        return
    leave_room(game.room_id)
    logger.info("Socket for %s left room %s", player_id, game.room_id)

"""Game lifecycle service: creation, joining, lookup, and player history."""
import logging
from typing import Any
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models.game import Game, GameMode, GamePhase
from ..models.player import Player
from ..models.player_game import PlayerGame
from ..utils.room_code import generate_room_code
from ..utils.id_generator import generate_guest_id
from ..errors import Conflict, GameNotFoundError, ValidationError

logger = logging.getLogger(__name__)

_JOIN_ATTEMPTS = 5


def parse_game_mode(value: str | None) -> GameMode:
    """Parse a client-supplied game mode, defaulting to Prompt Anything.

    Raises:
        ValidationError: If the value is not a known mode.
    """
    if not value:
        return GameMode.PROMPT_ANYTHING
    try:
        return GameMode(str(value).upper())
    except ValueError:
        raise ValidationError(f"Unknown game mode '{value}'") from None


def _unique_room_code() -> str:
    for _ in range(10):
        code = generate_room_code()
        existing = db.session.execute(
            db.select(Game.id).where(Game.room_id == code)
        ).scalar_one_or_none()
        if existing is None:
            return code
    return generate_room_code()  # Accept small collision risk after 10 attempts


def _clean_name(name: str | None) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Player name is required")
    if len(name) > 50:
        raise ValidationError("Player name must be 50 characters or fewer")
    return name


def _get_or_create_player(player_id: str, name: str, email: str | None = None) -> Player:
    player = db.session.get(Player, player_id)
    if player is None:
        player = Player(id=player_id, name=name, email=email)
        db.session.add(player)
        db.session.flush()
    return player


def create_game(
    player_name: str | None,
    room_id: str | None = None,
    player_id: str | None = None,
    game_mode: str | None = None,
    max_rounds: Any = None,
    email: str | None = None,
) -> Game:
    """Create a game, its host player if new, and the host membership.

    All three writes commit together or not at all.

    Args:
        player_name: Host display name.
        room_id: Desired room code; generated when omitted.
        player_id: Host's global player id; a guest id is generated when omitted.
        game_mode: "PROMPT_ANYTHING" (default) or "PROMPTOPHONE".
        max_rounds: Rounds for Prompt Anything; defaults to DEFAULT_MAX_ROUNDS.
        email: Optional email for a newly created player.

    Returns:
        The new Game.

    Raises:
        ValidationError: If the name, mode, or round count is invalid.
        Conflict: If the room code is taken.
    """
    player_name = _clean_name(player_name)

    mode = parse_game_mode(game_mode)
    if max_rounds is None:
        max_rounds = current_app.config["DEFAULT_MAX_ROUNDS"]
    try:
        max_rounds = int(max_rounds)
    except (TypeError, ValueError):
        raise ValidationError("maxRounds must be a whole number") from None
    if max_rounds < 1:
        raise ValidationError("maxRounds must be at least 1")

    room_id = (room_id or "").strip() or _unique_room_code()
    existing = db.session.execute(
        db.select(Game.id).where(Game.room_id == room_id)
    ).scalar_one_or_none()
    if existing is not None:
        raise Conflict("A game with that room already exists", code="ROOM_TAKEN")

    try:
        game = Game(
            room_id=room_id,
            game_mode=mode,
            phase=GamePhase.LOBBY,
            current_round=0,
            max_rounds=max_rounds,
            exclusion_words=[],
        )
        db.session.add(game)
        db.session.flush()  # Get game.id without committing

        player = _get_or_create_player(player_id or generate_guest_id(), player_name, email)
        db.session.add(PlayerGame(
            player_id=player.id,
            game_id=game.id,
            is_host=True,
            score=0,
            join_order=0,
        ))
        game.host_id = player.id
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise Conflict("A game with that room already exists", code="ROOM_TAKEN") from exc

    logger.info("Created %s game in room %s hosted by %s", mode.value, room_id, game.host_id)
    return game


def _next_join_order(game: Game) -> int:
    highest = db.session.execute(
        db.select(db.func.max(PlayerGame.join_order)).where(PlayerGame.game_id == game.id)
    ).scalar_one_or_none()
    return 0 if highest is None else highest + 1


def add_player(game: Game, name: str | None, player_id: str | None = None) -> PlayerGame:
    """Add a player to a lobby game. Re-joining is a no-op.

    Membership freezes once the game starts, so chain rotation stays stable.
    Join order is unique per game; a join that loses a race for the next
    slot is retried with a freshly read order.

    Args:
        game: The Game instance.
        name: Display name, used when the player is new.
        player_id: Global player id; a guest id is generated when omitted.

    Returns:
        The player's PlayerGame row.

    Raises:
        ValidationError: If the name is missing or too long.
        Conflict: If the game has already started, or no join slot could be claimed.
    """
    name = _clean_name(name)

    existing = game.membership(player_id)
    if existing is not None:
        return existing
    if game.phase != GamePhase.LOBBY:
        raise Conflict("Game has already started")

    player_id = player_id or generate_guest_id()
    for _ in range(_JOIN_ATTEMPTS):
        player = _get_or_create_player(player_id, name)
        membership = PlayerGame(
            player_id=player.id,
            game_id=game.id,
            is_host=False,
            score=0,
            join_order=_next_join_order(game),
        )
        db.session.add(membership)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = game.membership(player_id)
            if existing is not None:
                return existing
            if game.phase != GamePhase.LOBBY:
                raise Conflict("Game has already started")
            logger.info("Join order taken in room %s, retrying for %s", game.room_id, player_id)
            continue

        logger.info("Player %s joined room %s as #%d", player_id, game.room_id, membership.join_order)
        return membership

    raise Conflict("Could not join the game, please try again")


def get_game_or_404(room_id: str) -> Game:
    """Fetch a game by room id or raise GameNotFoundError.

    Args:
        room_id: The room code to look up.

    Returns:
        The matching Game instance.

    Raises:
        GameNotFoundError: If not found.
    """
    game = db.session.execute(
        db.select(Game).where(Game.room_id == room_id)
    ).scalar_one_or_none()
    if game is None:
        raise GameNotFoundError()
    return game


def player_history(
    player_id: str, status: str | None = None, game_mode: str | None = None
) -> list[dict[str, Any]]:
    """Summaries of every game the player has joined, newest first.

    Args:
        player_id: The player.
        status: "complete" (ENDED games) or "in-progress" (everything else).
        game_mode: Optional mode filter.

    Returns:
        List of game summary dicts.
    """
    from .state_service import build_history_summary

    games = db.session.execute(
        db.select(Game)
        .join(PlayerGame, PlayerGame.game_id == Game.id)
        .where(PlayerGame.player_id == player_id)
        .order_by(Game.created_at.desc(), Game.id.desc())
    ).scalars().all()

    if status == "complete":
        games = [g for g in games if g.phase == GamePhase.ENDED]
    elif status == "in-progress":
        games = [g for g in games if g.phase != GamePhase.ENDED]
    if game_mode:
        games = [g for g in games if g.game_mode.value == str(game_mode).upper()]

    return [build_history_summary(g, player_id) for g in games]

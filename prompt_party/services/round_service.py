"""Round service: phase transitions, round status, and deadlines.

Every phase change goes through ``transition``, a conditional UPDATE that
only matches while the game is still in the phase and round the caller saw.
When two requests race to end the same round, one wins and the other sees
zero rows and leaves the game alone.
"""
import logging
import math
from typing import Any
from flask import current_app
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.image import Image, PLACEHOLDER_PREFIX
from ..utils.clock import utcnow
from ..utils.words import pick_word, pick_words
from . import chain_service
from ..errors import Conflict, PermissionDenied

logger = logging.getLogger(__name__)


def transition(game: Game, expected_phase: GamePhase, **values: Any) -> bool:
    """Apply ``values`` to the game row if it is still in ``expected_phase``.

    The game instance is expired afterwards so the next attribute access
    reloads the row. The caller commits.

    Args:
        game: The Game instance as the caller observed it.
        expected_phase: Phase the game must still be in.
        **values: Column values to write.

    Returns:
        True if this call performed the transition.
    """
    observed_round = game.current_round
    result = db.session.execute(
        db.update(Game)
        .where(
            Game.id == game.id,
            Game.phase == expected_phase,
            Game.current_round == observed_round,
        )
        .values(updated_at=utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    db.session.expire(game)
    won = result.rowcount == 1
    if not won:
        logger.debug(
            "Lost transition race in room %s (expected %s, round %d)",
            game.room_id, expected_phase.value, observed_round,
        )
    return won


def _assert_host(game: Game, player_id: str | None, message: str) -> None:
    """Raise PermissionDenied unless ``player_id`` is the game's host."""
    membership = game.membership(player_id)
    if membership is None or not membership.is_host:
        raise PermissionDenied(message)


def time_remaining(game: Game, duration: int) -> int:
    """Whole seconds left in the current phase, never negative."""
    if game.round_start_time is None:
        elapsed = 0.0
    else:
        elapsed = (utcnow() - game.round_start_time).total_seconds()
    return max(0, math.ceil(duration - elapsed))


def start_game(game: Game, player_id: str | None) -> bool:
    """Host moves the game from LOBBY to the first PROMPT round.

    Freezes the player count. Promptophone games get one chain per player;
    Prompt Anything games get a random target word.

    Raises:
        PermissionDenied: If the caller is not the host.
        Conflict: If the game has already started.
    """
    _assert_host(game, player_id, "Only the host can start the game")
    if game.phase != GamePhase.LOBBY:
        raise Conflict("Game has already started")

    player_count = len(game.player_games)
    now = utcnow()

    if game.is_promptophone:
        chain_words = pick_words(player_count)
        entry = chain_words[0] if chain_words else pick_word()
    else:
        entry = pick_word()

    won = transition(
        game,
        GamePhase.LOBBY,
        phase=GamePhase.PROMPT,
        current_round=1,
        current_word=entry.word,
        exclusion_words=list(entry.exclusion_words),
        round_start_time=now,
        player_count=player_count,
    )
    if not won:
        db.session.rollback()
        return False

    if game.is_promptophone:
        chain_service.create_chains(game, chain_words)
    db.session.commit()
    logger.info(
        "Started %s game in room %s with %d players (word=%s)",
        game.game_mode.value, game.room_id, player_count, game.current_word,
    )
    return True


def submissions_complete(game: Game) -> bool:
    """Return True when every member has submitted for the current round.

    Prompt Anything counts any image for the round, generated or not.
    Promptophone checks each player's assigned chain.
    """
    if game.is_promptophone:
        return chain_service.all_players_submitted(game)
    submitted = {img.player_id for img in game.images if img.round_number == game.current_round}
    return bool(game.player_games) and all(pg.player_id in submitted for pg in game.player_games)


def has_player_submitted(game: Game, player_id: str | None) -> bool:
    """Return True if ``player_id`` has submitted for the current round."""
    if not player_id:
        return False
    if game.is_promptophone:
        return chain_service.has_submitted_to_assigned_chain(game, player_id)
    return any(
        img.player_id == player_id and img.round_number == game.current_round
        for img in game.images
    )


def round_status(game: Game, player_id: str | None) -> dict[str, Any]:
    """Build the prompt-phase status polled by clients.

    Args:
        game: The Game instance.
        player_id: Optional player asking; drives ``hasSubmitted``.

    Returns:
        Dict with allPlayersSubmitted, hasSubmitted, timeRemaining, shouldEndRound.
    """
    all_submitted = submissions_complete(game)
    remaining = time_remaining(game, current_app.config["ROUND_DURATION"])
    return {
        "allPlayersSubmitted": all_submitted,
        "hasSubmitted": has_player_submitted(game, player_id),
        "timeRemaining": remaining,
        "shouldEndRound": all_submitted or remaining <= 0,
    }


def all_images_generated(game: Game) -> bool:
    """Return True once every member has a non-placeholder image this round."""
    generated = {
        img.player_id
        for img in game.images
        if img.round_number == game.current_round and not img.is_placeholder
    }
    return bool(game.player_games) and all(pg.player_id in generated for pg in game.player_games)


def begin_voting(game: Game) -> bool:
    """Prompt Anything: move PROMPT → VOTING and restart the clock."""
    if game.is_promptophone or game.phase != GamePhase.PROMPT:
        return False
    won = transition(game, GamePhase.PROMPT, phase=GamePhase.VOTING, round_start_time=utcnow())
    db.session.commit()
    if won:
        logger.info("Room %s round %d: voting opened", game.room_id, game.current_round)
    return won


def begin_voting_if_ready(game: Game) -> bool:
    """Open voting once all of this round's images have been generated."""
    if game.is_promptophone or game.phase != GamePhase.PROMPT:
        return False
    if not all_images_generated(game):
        return False
    return begin_voting(game)


def _previous_round_image_url(game: Game) -> str | None:
    """Most recent generated image URL tagged with the current round."""
    return db.session.execute(
        db.select(Image.url)
        .where(
            Image.game_id == game.id,
            Image.round_number == game.current_round,
            Image.url.not_like(f"{PLACEHOLDER_PREFIX}%"),
        )
        .order_by(Image.created_at.desc(), Image.id.desc())
        .limit(1)
    ).scalar_one_or_none()


def advance_promptophone_round(game: Game) -> bool:
    """Promptophone: PROMPT → next PROMPT round, or → RESULTS after the last round.

    Returns:
        True if this call moved the game.
    """
    if not game.is_promptophone or game.phase != GamePhase.PROMPT:
        return False

    now = utcnow()
    if game.current_round >= game.round_ceiling:
        won = transition(game, GamePhase.PROMPT, phase=GamePhase.RESULTS, round_start_time=now)
        db.session.commit()
        if won:
            logger.info("Room %s: all chains complete, showing results", game.room_id)
        return won

    next_word = _previous_round_image_url(game)
    if next_word is None:
        chains = game.prompt_chains
        index = game.current_round
        next_word = chains[index].original_word if index < len(chains) else game.current_word

    next_round = game.current_round + 1
    won = transition(
        game,
        GamePhase.PROMPT,
        current_round=next_round,
        current_word=next_word,
        exclusion_words=[],
        round_start_time=now,
    )
    db.session.commit()
    if won:
        logger.info("Room %s: advanced to chain round %d", game.room_id, next_round)
    return won


def advance_if_all_submitted(game: Game) -> bool:
    """Promptophone: advance as soon as every player has continued their chain."""
    if not game.is_promptophone or game.phase != GamePhase.PROMPT:
        return False
    if not chain_service.all_players_submitted(game):
        return False
    return advance_promptophone_round(game)


def end_round(game: Game) -> bool:
    """End the prompt phase early (all submitted) or on timeout.

    A no-op outside the PROMPT phase, so repeated calls are safe.
    """
    if game.phase != GamePhase.PROMPT:
        return False
    if game.is_promptophone:
        return advance_promptophone_round(game)
    return begin_voting(game)


def next_round(game: Game, player_id: str | None) -> bool:
    """Host starts the next round.

    Prompt Anything moves RESULTS → PROMPT with a new word until
    ``max_rounds`` is reached, after which RESULTS is terminal. Promptophone
    force-advances the chain round.

    Raises:
        PermissionDenied: If the caller is not the host.
        Conflict: If the current round has not finished.
    """
    _assert_host(game, player_id, "Only the host can start the next round")

    if game.is_promptophone:
        if game.phase == GamePhase.PROMPT:
            return advance_promptophone_round(game)
        if game.phase == GamePhase.RESULTS:
            return False
        raise Conflict("Game has not started")

    if game.phase != GamePhase.RESULTS:
        raise Conflict("The current round is still in progress")
    if game.current_round >= game.max_rounds:
        logger.info("Room %s: final round already played", game.room_id)
        return False

    entry = pick_word()
    next_number = game.current_round + 1
    won = transition(
        game,
        GamePhase.RESULTS,
        phase=GamePhase.PROMPT,
        current_round=next_number,
        current_word=entry.word,
        exclusion_words=list(entry.exclusion_words),
        round_start_time=utcnow(),
    )
    db.session.commit()
    if won:
        logger.info("Room %s: round %d started (word=%s)", game.room_id, next_number, entry.word)
    return won


def enforce_deadline(game: Game) -> bool:
    """End an expired PROMPT or VOTING phase without waiting for a client.

    Called on every state read when ENFORCE_DEADLINES is enabled.

    Returns:
        True if a phase was ended.
    """
    config = current_app.config
    if not config["ENFORCE_DEADLINES"]:
        return False

    if game.phase == GamePhase.PROMPT:
        if time_remaining(game, config["ROUND_DURATION"]) <= 0:
            logger.info("Room %s round %d: prompt time expired", game.room_id, game.current_round)
            return end_round(game)
    elif game.phase == GamePhase.VOTING:
        if time_remaining(game, config["VOTING_DURATION"]) <= 0:
            from .vote_service import end_voting
            logger.info("Room %s round %d: voting time expired", game.room_id, game.current_round)
            return end_voting(game)
    return False

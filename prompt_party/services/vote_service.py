"""Vote service: casting votes, voting status, and closing the vote."""
import logging
from typing import Any
from flask import current_app
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.image import Image
from ..models.vote import Vote
from . import round_service, scoring_service
from ..errors import Conflict, PermissionDenied, ValidationError

logger = logging.getLogger(__name__)


def cast_vote(game: Game, voter_id: str | None, image_id: Any) -> Vote:
    """Record a vote, replacing the voter's previous vote if there is one.

    Voting closes (and scores are tallied) once every member has voted.

    Args:
        game: The Game instance.
        voter_id: The voting player.
        image_id: Id of an image from the current round.

    Returns:
        The new Vote.

    Raises:
        ValidationError: If ids are missing or the image is not in this round.
        PermissionDenied: If the voter is not in the game.
        Conflict: If the game is not in the voting phase.
    """
    if not image_id or not voter_id:
        raise ValidationError("Image ID and voter ID are required")
    if game.membership(voter_id) is None:
        raise PermissionDenied("Voter not in game")
    if game.phase != GamePhase.VOTING:
        raise Conflict("Voting is not open")

    try:
        image = db.session.get(Image, int(image_id))
    except (TypeError, ValueError):
        image = None
    if image is None or image.game_id != game.id or image.round_number != game.current_round:
        raise ValidationError("Image not found in this round")

    db.session.execute(
        db.delete(Vote).where(Vote.game_id == game.id, Vote.voter_id == voter_id)
    )
    vote = Vote(
        game_id=game.id,
        image_id=image.id,
        voter_id=voter_id,
        round_number=game.current_round,
    )
    db.session.add(vote)
    db.session.commit()
    logger.info("Room %s round %d: %s voted", game.room_id, vote.round_number, voter_id)

    if all_voted(game):
        end_voting(game)
    return vote


def _voter_ids(game: Game) -> set[str]:
    return {
        v.voter_id
        for v in db.session.execute(
            db.select(Vote).where(Vote.game_id == game.id, Vote.round_number == game.current_round)
        ).scalars().all()
    }


def all_voted(game: Game) -> bool:
    """Return True once every member has voted in the current round."""
    voters = _voter_ids(game)
    return bool(game.player_games) and all(pg.player_id in voters for pg in game.player_games)


def voting_status(game: Game, voter_id: str | None) -> dict[str, Any]:
    """Build the voting-phase status polled by clients.

    Args:
        game: The Game instance.
        voter_id: Optional player asking; drives ``hasVoted``.

    Returns:
        Dict with allPlayersVoted, hasVoted, timeRemaining, shouldEndRound.
    """
    voters = _voter_ids(game)
    everyone = bool(game.player_games) and all(pg.player_id in voters for pg in game.player_games)
    remaining = round_service.time_remaining(game, current_app.config["VOTING_DURATION"])
    return {
        "allPlayersVoted": everyone,
        "hasVoted": bool(voter_id) and voter_id in voters,
        "timeRemaining": remaining,
        "shouldEndRound": everyone or remaining <= 0,
    }


def end_voting(game: Game) -> bool:
    """Close voting: VOTING → RESULTS, tallying scores in the same transaction.

    Only the request that wins the phase change tallies, so concurrent
    callers never double count. A no-op outside the voting phase.

    Returns:
        True if this call closed the vote.
    """
    if game.phase != GamePhase.VOTING:
        return False

    won = round_service.transition(game, GamePhase.VOTING, phase=GamePhase.RESULTS)
    if won:
        scoring_service.tally_round(game)
    db.session.commit()
    if won:
        logger.info("Room %s round %d: voting closed", game.room_id, game.current_round)
    return won

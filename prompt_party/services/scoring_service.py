"""Scoring aggregator: turns a round's votes into score increments."""
import logging
from typing import List, NamedTuple
from ..extensions import db
from ..models.game import Game
from ..models.image import Image
from ..models.player_game import PlayerGame
from ..models.vote import Vote

logger = logging.getLogger(__name__)


class ScoreIncrement(NamedTuple):
    """Points awarded to an image's author in one aggregation pass."""

    image_id: int
    player_id: str
    points: int


def tally_round(game: Game) -> List[ScoreIncrement]:
    """Add each current-round image's vote count to its author's score.

    Every image gets an update, zero-vote images included, so the sum of the
    returned points always equals the number of votes cast this round. The
    caller owns the transaction; nothing is committed here.

    Args:
        game: The Game whose voting phase is ending.

    Returns:
        One ScoreIncrement per image, in image id order.
    """
    round_number = game.current_round
    images = db.session.execute(
        db.select(Image)
        .where(Image.game_id == game.id, Image.round_number == round_number)
        .order_by(Image.id)
    ).scalars().all()

    vote_counts = dict(
        db.session.execute(
            db.select(Vote.image_id, db.func.count(Vote.id))
            .where(Vote.game_id == game.id, Vote.round_number == round_number)
            .group_by(Vote.image_id)
        ).all()
    )

    increments = []
    for image in images:
        points = vote_counts.get(image.id, 0)
        db.session.execute(
            db.update(PlayerGame)
            .where(PlayerGame.game_id == game.id, PlayerGame.player_id == image.player_id)
            .values(score=PlayerGame.score + points)
            .execution_options(synchronize_session=False)
        )
        increments.append(ScoreIncrement(image.id, image.player_id, points))

    logger.info(
        "Tallied round %d in room %s: %d votes across %d images",
        round_number, game.room_id, sum(i.points for i in increments), len(increments),
    )
    return increments

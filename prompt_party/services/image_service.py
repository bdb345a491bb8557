"""Image service: turns a submitted prompt's placeholder into a generated image."""
import logging
from flask import current_app
from ..extensions import db
from ..models.game import Game
from ..models.image import Image, PLACEHOLDER_PREFIX
from .image_generator import ImageGenerationError
from . import round_service, submission_service
from ..errors import PlayerNotFoundError, UpstreamFailure, ValidationError

logger = logging.getLogger(__name__)


def _latest_placeholder(game: Game, player_id: str) -> Image | None:
    """Newest placeholder for the player in the current round.

    Prompt Anything placeholders from earlier rounds are stale and ignored.
    Promptophone falls back to the newest placeholder from any round.
    """
    def newest(*criteria):
        return db.session.execute(
            db.select(Image)
            .where(
                Image.game_id == game.id,
                Image.player_id == player_id,
                Image.url.like(f"{PLACEHOLDER_PREFIX}%"),
                *criteria,
            )
            .order_by(Image.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    image = newest(Image.round_number == game.current_round)
    if image is None and game.is_promptophone:
        image = newest()
    return image


def generate_image(game: Game, player_id: str | None, prompt: str | None) -> Image:
    """Generate the image for a player's pending submission.

    If the player has no placeholder yet, the prompt is submitted first
    through the normal submission guard. After the URL is stored the phase
    rules are re-evaluated: Prompt Anything opens voting once every image
    exists, Promptophone advances once every chain has been continued.

    Args:
        game: The Game instance.
        player_id: The player whose image is generated.
        prompt: Prompt text; defaults to the placeholder's stored prompt.

    Returns:
        The updated Image.

    Raises:
        PlayerNotFoundError: If the player is not in the game.
        ValidationError: If there is no prompt to generate from.
        UpstreamFailure: If the image service fails.
    """
    if not player_id or game.membership(player_id) is None:
        raise PlayerNotFoundError()

    image = _latest_placeholder(game, player_id)
    if image is None:
        image = submission_service.submit_prompt(game, player_id, prompt)
    prompt = (prompt or "").strip() or image.prompt
    if not prompt:
        raise ValidationError("Prompt is required")

    logger.info("Room %s: generating image %d for %s", game.room_id, image.id, player_id)
    generator = current_app.extensions["image_generator"]
    try:
        url = generator.generate(prompt)
    except ImageGenerationError as exc:
        logger.warning("Image generation failed for image %d: %s", image.id, exc)
        raise UpstreamFailure() from exc

    image.url = url
    db.session.commit()

    if game.is_promptophone:
        round_service.advance_if_all_submitted(game)
    else:
        round_service.begin_voting_if_ready(game)
    return image

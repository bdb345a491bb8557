"""Submission guard: validates and records prompt submissions."""
import logging
from typing import Iterable
from flask import current_app
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models.game import Game, GamePhase
from ..models.image import Image, placeholder_url
from ..models.prompt_chain import ChainStep
from ..utils.words import exclusions_for
from . import chain_service, round_service
from ..errors import (
    Conflict,
    DuplicateSubmissionError,
    PermissionDenied,
    ValidationError,
)

logger = logging.getLogger(__name__)


def find_forbidden_word(prompt: str, words: Iterable[str | None]) -> str | None:
    """Return the first word found in ``prompt`` (case-insensitive substring), if any."""
    lowered = prompt.lower()
    for word in words:
        if word and word.lower() in lowered:
            return word
    return None


def forbidden_words_for(game: Game, player_id: str) -> list[str]:
    """Return the target and exclusion words a player's prompt must avoid.

    Promptophone rounds whose target is an image have nothing to avoid.
    """
    if not game.is_promptophone:
        return [game.current_word or "", *(game.exclusion_words or [])]

    chain = chain_service.assigned_chain(game, player_id)
    target = chain_service.chain_target(chain, game.current_round)
    if target != chain.original_word:
        return []
    return [chain.original_word, *exclusions_for(chain.original_word)]


def submit_prompt(game: Game, player_id: str | None, prompt: str | None, auto: bool = False) -> Image:
    """Record a player's prompt for the current round.

    Creates an Image with a placeholder URL tagged with the current round
    and, in Promptophone, appends a step to the player's assigned chain.
    A Promptophone round advances as soon as every player has continued
    their chain.

    Args:
        game: The Game instance.
        player_id: The submitting player.
        prompt: Prompt text.
        auto: True when the client submits on timer expiry; skips content
            validation.

    Returns:
        The created Image.

    Raises:
        ValidationError: If prompt or player id is missing, or the prompt
            uses a forbidden word.
        PermissionDenied: If the player is not in the game.
        Conflict: If the game is not accepting prompts.
        DuplicateSubmissionError: If the player already submitted.
        ChainNotFoundError: If the assigned chain does not exist.
    """
    prompt = (prompt or "").strip()
    if not prompt or not player_id:
        raise ValidationError("Prompt and playerId are required")
    if game.membership(player_id) is None:
        raise PermissionDenied("Player not in game")
    if game.phase != GamePhase.PROMPT:
        raise Conflict("Prompts are not being accepted right now")

    chain = None
    if game.is_promptophone:
        chain = chain_service.assigned_chain(game, player_id)
        if chain.step_by(player_id) is not None:
            raise DuplicateSubmissionError(
                "Player has already submitted" if auto
                else "Player has already submitted a prompt for this round"
            )
    elif round_service.has_player_submitted(game, player_id):
        raise DuplicateSubmissionError(
            "Player has already submitted" if auto else "Player has already submitted a prompt"
        )

    if not auto and current_app.config["VALIDATE_PROMPT_CONTENT"]:
        forbidden = find_forbidden_word(prompt, forbidden_words_for(game, player_id))
        if forbidden:
            raise ValidationError(f"Prompt contains a forbidden word: {forbidden}")

    round_number = game.current_round
    image = Image(
        game_id=game.id,
        player_id=player_id,
        prompt=prompt,
        url=placeholder_url(),
        round_number=round_number,
    )
    db.session.add(image)
    try:
        db.session.flush()
        if chain is not None:
            db.session.add(ChainStep(
                chain_id=chain.id,
                player_id=player_id,
                image_id=image.id,
                round_number=round_number,
                prompt=prompt,
            ))
        db.session.commit()
    except IntegrityError as exc:
        # A concurrent request from the same player got there first
        db.session.rollback()
        raise DuplicateSubmissionError() from exc

    logger.info(
        "Room %s round %d: %s submitted%s",
        game.room_id, round_number, player_id, " (auto)" if auto else "",
    )

    if game.is_promptophone:
        round_service.advance_if_all_submitted(game)
    return image

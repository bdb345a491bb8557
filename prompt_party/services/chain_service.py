"""Chain assignment for Promptophone: which chain each player continues each round.

Players and chains share one ordering: a player's join order is the index of
the chain they originated. In round ``r`` the player at index ``i`` works on
chain ``(i + r - 1) mod n``, so round 1 starts everyone on their own chain and
over rounds ``1..n`` every player touches every chain exactly once.
"""
import logging
from typing import List
from ..extensions import db
from ..models.game import Game
from ..models.prompt_chain import PromptChain
from ..utils.words import WordEntry
from ..errors import ChainNotFoundError, PermissionDenied

logger = logging.getLogger(__name__)


def chain_index_for(player_index: int, current_round: int, num_players: int) -> int:
    """Return the chain index a player works on in a round.

    Args:
        player_index: Zero-based join order of the player.
        current_round: One-based round number.
        num_players: Player count frozen at game start.

    Returns:
        Zero-based chain index.
    """
    if num_players <= 0:
        raise ValueError("num_players must be positive")
    return (player_index + current_round - 1) % num_players


def create_chains(game: Game, words: List[WordEntry]) -> List[PromptChain]:
    """Create one chain per member, each seeded with its own bank word.

    Chains are added to the session but not committed.

    Args:
        game: The Game being started; members ordered by join order.
        words: One shuffled bank entry per member, in join order.

    Returns:
        The new chains ordered by position.
    """
    members = list(game.player_games)
    chains = []
    for pg, entry in zip(members, words):
        chain = PromptChain(
            game_id=game.id,
            player_id=pg.player_id,
            position=pg.join_order,
            original_word=entry.word,
        )
        db.session.add(chain)
        chains.append(chain)
    db.session.flush()
    logger.info(
        "Created %d prompt chains for room %s: %s",
        len(chains), game.room_id, [c.original_word for c in chains],
    )
    return chains


def assigned_chain(game: Game, player_id: str) -> PromptChain:
    """Return the chain ``player_id`` must continue this round.

    Raises:
        PermissionDenied: If the player is not in the game.
        ChainNotFoundError: If no chain sits at the computed index.
    """
    membership = game.membership(player_id)
    if membership is None:
        raise PermissionDenied("Player not in game")

    num_players = game.player_count or len(game.player_games)
    index = chain_index_for(membership.join_order, game.current_round, num_players)
    for chain in game.prompt_chains:
        if chain.position == index:
            return chain

    logger.error(
        "No prompt chain at index %d for player %s in room %s (round %d)",
        index, player_id, game.room_id, game.current_round,
    )
    raise ChainNotFoundError()


def has_submitted_to_assigned_chain(game: Game, player_id: str) -> bool:
    """Return True if the player's assigned chain already has their step."""
    try:
        chain = assigned_chain(game, player_id)
    except (ChainNotFoundError, PermissionDenied):
        return False
    return chain.step_by(player_id) is not None


def all_players_submitted(game: Game) -> bool:
    """Return True once every member has a step in their assigned chain."""
    members = game.player_games
    return bool(members) and all(has_submitted_to_assigned_chain(game, pg.player_id) for pg in members)


def chain_target(chain: PromptChain, current_round: int) -> str:
    """Return what the contributor should describe this round.

    Round 1 is the chain's original word. Later rounds use the image from the
    chain's step in the previous round, falling back to the original word if
    that step is missing or its image is still being generated.
    """
    if current_round > 1:
        for step in chain.steps:
            if step.round_number == current_round - 1 and not step.image.is_placeholder:
                return step.image.url
    return chain.original_word

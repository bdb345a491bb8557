"""State serialization service: the single source of truth for game snapshots.

Snapshots use the camelCase keys the web client reads. The same payload is
returned from HTTP endpoints and broadcast over Socket.IO.
"""
from typing import Any
from ..models.game import Game, GamePhase
from ..models.image import Image
from ..models.player_game import PlayerGame
from ..models.prompt_chain import PromptChain, ChainStep
from ..utils.words import exclusions_for
from . import chain_service


def _iso(value) -> str | None:
    return value.isoformat() + "Z" if value is not None else None


def _player_dict(pg: PlayerGame) -> dict[str, Any]:
    return {
        "id": pg.player.id,
        "name": pg.player.name,
        "email": pg.player.email,
        "isHost": pg.is_host,
        "score": pg.score,
        "joinOrder": pg.join_order,
    }


def _image_dict(image: Image) -> dict[str, Any]:
    return {
        "id": image.id,
        "playerId": image.player_id,
        "prompt": image.prompt,
        "url": image.url,
        "round": image.round_number,
        "createdAt": _iso(image.created_at),
        "player": {"id": image.player.id, "name": image.player.name},
        "votes": [
            {"id": v.id, "voterId": v.voter_id, "imageId": v.image_id}
            for v in image.votes
        ],
    }


def _step_dict(step: ChainStep) -> dict[str, Any]:
    return {
        "playerId": step.player_id,
        "prompt": step.prompt,
        "imageUrl": step.image.url,
        "round": step.round_number,
    }


def _chain_dict(chain: PromptChain) -> dict[str, Any]:
    return {
        "id": chain.id,
        "playerId": chain.player_id,
        "originalWord": chain.original_word,
        "position": chain.position,
        "chain": [_step_dict(s) for s in chain.steps],
    }


def _assignments(game: Game) -> list[dict[str, Any]]:
    """Per-player chain assignment for the current Promptophone round."""
    result = []
    for pg in game.player_games:
        chain = chain_service.assigned_chain(game, pg.player_id)
        result.append({
            "playerId": pg.player_id,
            "chainId": chain.id,
            "chainIndex": chain.position,
            "target": chain_service.chain_target(chain, game.current_round),
            "hasSubmitted": chain.step_by(pg.player_id) is not None,
        })
    return result


def build_game_snapshot(game: Game) -> dict[str, Any]:
    """Build the full client-facing game state.

    Args:
        game: The Game ORM instance (must be inside an active db session).

    Returns:
        A dict representing the game.
    """
    if game.phase == GamePhase.PROMPT and game.current_word:
        exclusion_words = exclusions_for(game.current_word) or list(game.exclusion_words or [])
    else:
        exclusion_words = list(game.exclusion_words or [])

    snapshot = {
        "id": game.id,
        "roomId": game.room_id,
        "gameMode": game.game_mode.value,
        "phase": game.phase.value,
        "currentRound": game.current_round,
        "maxRounds": game.max_rounds,
        "currentWord": game.current_word,
        "exclusionWords": exclusion_words,
        "roundStartTime": _iso(game.round_start_time),
        "hostId": game.host_id,
        "isComplete": game.phase == GamePhase.ENDED,
        "players": [_player_dict(pg) for pg in game.player_games],
        "images": [_image_dict(img) for img in game.images],
        "promptChains": [_chain_dict(c) for c in game.prompt_chains],
        "assignments": [],
    }
    if game.is_promptophone and game.phase == GamePhase.PROMPT and game.prompt_chains:
        snapshot["assignments"] = _assignments(game)
    return snapshot


def build_history_summary(game: Game, player_id: str) -> dict[str, Any]:
    """Summarise one game from a player's point of view.

    Args:
        game: The Game instance.
        player_id: The player whose history is being listed.

    Returns:
        Summary dict including the winner and full game data.
    """
    members = list(game.player_games)
    mine = game.membership(player_id)
    winner = None
    for pg in members:
        if winner is None or pg.score > winner.score:
            winner = pg

    return {
        "id": game.id,
        "roomId": game.room_id,
        "gameMode": game.game_mode.value,
        "createdAt": _iso(game.created_at),
        "updatedAt": _iso(game.updated_at),
        "playerCount": len(members),
        "playerScore": mine.score if mine else 0,
        "playerName": mine.player.name if mine else "Unknown",
        "winner": {
            "name": winner.player.name if winner else None,
            "score": winner.score if winner else 0,
        },
        "totalImages": len(game.images),
        "hasPromptChains": len(game.prompt_chains) > 0,
        "status": "Complete" if game.phase == GamePhase.ENDED else "In Progress",
        "phase": game.phase.value,
        "fullGameData": {
            "playerGames": [_player_dict(pg) for pg in members],
            "images": [_image_dict(img) for img in game.images],
            "promptChains": [_chain_dict(c) for c in game.prompt_chains],
            "currentRound": game.current_round,
            "maxRounds": game.max_rounds,
            "currentWord": game.current_word,
            "exclusionWords": list(game.exclusion_words or []),
        },
    }

"""Re-exports all models to ensure Alembic detects them."""
from .game import Game, GameMode, GamePhase
from .player import Player
from .player_game import PlayerGame
from .image import Image
from .prompt_chain import PromptChain, ChainStep
from .vote import Vote

__all__ = [
    "Game",
    "GameMode",
    "GamePhase",
    "Player",
    "PlayerGame",
    "Image",
    "PromptChain",
    "ChainStep",
    "Vote",
]

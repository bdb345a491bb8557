"""Game model."""
import enum
from datetime import datetime
from sqlalchemy import String, DateTime, Enum, ForeignKey, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow


class GameMode(str, enum.Enum):
    """Supported game modes."""

    PROMPT_ANYTHING = "PROMPT_ANYTHING"
    PROMPTOPHONE = "PROMPTOPHONE"


class GamePhase(str, enum.Enum):
    """Game lifecycle phases."""

    LOBBY = "LOBBY"
    PROMPT = "PROMPT"
    VOTING = "VOTING"
    RESULTS = "RESULTS"
    # Reserved for archival; no transition rule enters it
    ENDED = "ENDED"


class Game(db.Model):
    """Represents a single game session bound to a room."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    room_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    game_mode: Mapped[GameMode] = mapped_column(
        Enum(GameMode, values_callable=lambda e: [v.value for v in e]),
        nullable=False,
        default=GameMode.PROMPT_ANYTHING,
    )
    phase: Mapped[GamePhase] = mapped_column(
        Enum(GamePhase, values_callable=lambda e: [v.value for v in e]),
        nullable=False,
        default=GamePhase.LOBBY,
    )
    current_round: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_rounds: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    # A bank word, or an image URL in later Promptophone rounds
    current_word: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    exclusion_words: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    round_start_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    host_id: Mapped[str | None] = mapped_column(String(64), ForeignKey("players.id"), nullable=True)
    # Frozen at start; chain rotation never sees late joiners
    player_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    player_games: Mapped[list["PlayerGame"]] = relationship(  # type: ignore[name-defined]
        "PlayerGame",
        back_populates="game",
        lazy="select",
        order_by="PlayerGame.join_order",
    )
    images: Mapped[list["Image"]] = relationship(  # type: ignore[name-defined]
        "Image", back_populates="game", lazy="select", order_by="Image.id"
    )
    prompt_chains: Mapped[list["PromptChain"]] = relationship(  # type: ignore[name-defined]
        "PromptChain", back_populates="game", lazy="select", order_by="PromptChain.position"
    )
    votes: Mapped[list["Vote"]] = relationship(  # type: ignore[name-defined]
        "Vote", back_populates="game", lazy="select"
    )
    host: Mapped["Player | None"] = relationship(  # type: ignore[name-defined]
        "Player", foreign_keys=[host_id], lazy="select"
    )

    @property
    def is_promptophone(self) -> bool:
        """Return True for Promptophone games."""
        return self.game_mode == GameMode.PROMPTOPHONE

    @property
    def round_ceiling(self) -> int:
        """Last round number this game may reach."""
        if self.is_promptophone:
            return self.player_count or len(self.player_games)
        return self.max_rounds

    def membership(self, player_id: str | None) -> "PlayerGame | None":  # type: ignore[name-defined]
        """Return the PlayerGame row for ``player_id`` or None."""
        if not player_id:
            return None
        for pg in self.player_games:
            if pg.player_id == player_id:
                return pg
        return None

    def __repr__(self) -> str:
        return f"<Game room={self.room_id} mode={self.game_mode} phase={self.phase} round={self.current_round}>"

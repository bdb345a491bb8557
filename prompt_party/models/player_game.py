"""PlayerGame membership model."""
from datetime import datetime
from sqlalchemy import String, Boolean, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow


class PlayerGame(db.Model):
    """Associates one Player with one Game and carries the per-game score."""

    __tablename__ = "player_games"
    __table_args__ = (
        UniqueConstraint("player_id", "game_id", name="uq_player_game"),
        UniqueConstraint("game_id", "join_order", name="uq_player_game_join_order"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    player_id: Mapped[str] = mapped_column(String(64), ForeignKey("players.id"), nullable=False, index=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    is_host: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    score: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    # 0-indexed join order, drives chain rotation
    join_order: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    player: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", back_populates="player_games"
    )
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="player_games"
    )

    def __repr__(self) -> str:
        return f"<PlayerGame player={self.player_id} game={self.game_id} host={self.is_host}>"

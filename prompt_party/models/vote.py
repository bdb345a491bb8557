"""Vote model."""
from datetime import datetime
from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow


class Vote(db.Model):
    """A vote cast by a player for an image during the voting phase."""

    __tablename__ = "votes"
    # Last vote wins: a new vote replaces the voter's previous one
    __table_args__ = (UniqueConstraint("game_id", "voter_id", name="uq_game_voter_vote"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    image_id: Mapped[int] = mapped_column(Integer, ForeignKey("images.id"), nullable=False, index=True)
    voter_id: Mapped[str] = mapped_column(String(64), ForeignKey("players.id"), nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="votes"
    )
    image: Mapped["Image"] = relationship(  # type: ignore[name-defined]
        "Image", back_populates="votes"
    )

    def __repr__(self) -> str:
        return f"<Vote round={self.round_number} voter={self.voter_id} image={self.image_id}>"

"""Image (prompt submission) model."""
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow

PLACEHOLDER_PREFIX = "placeholder-"


def placeholder_url(now: datetime | None = None) -> str:
    """Build the sentinel URL stored until generation completes."""
    now = now or utcnow()
    millis = int((now - datetime(1970, 1, 1)).total_seconds() * 1000)
    return f"{PLACEHOLDER_PREFIX}{millis}"


class Image(db.Model):
    """A player's prompt and the image generated from it."""

    __tablename__ = "images"
    # One submission per player per round, in both modes
    __table_args__ = (UniqueConstraint("game_id", "player_id", "round_number", name="uq_image_player_round"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(64), ForeignKey("players.id"), nullable=False, index=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="images"
    )
    player: Mapped["Player"] = relationship(  # type: ignore[name-defined]
        "Player", lazy="select"
    )
    votes: Mapped[list["Vote"]] = relationship(  # type: ignore[name-defined]
        "Vote", back_populates="image", lazy="select"
    )

    @property
    def is_placeholder(self) -> bool:
        """Return True until the generator has produced a real URL."""
        return self.url.startswith(PLACEHOLDER_PREFIX)

    def __repr__(self) -> str:
        return f"<Image player={self.player_id} round={self.round_number} placeholder={self.is_placeholder}>"

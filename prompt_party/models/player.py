"""Player model."""
from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow


class Player(db.Model):
    """A global player identity, reused across games."""

    __tablename__ = "players"

    # Supplied by the client (auth id) or generated for guests
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    player_games: Mapped[list["PlayerGame"]] = relationship(  # type: ignore[name-defined]
        "PlayerGame", back_populates="player", lazy="select"
    )

    def __repr__(self) -> str:
        return f"<Player id={self.id} name={self.name}>"

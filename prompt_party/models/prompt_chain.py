"""Promptophone chain models."""
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..extensions import db
from ..utils.clock import utcnow


class PromptChain(db.Model):
    """One chain per player in a Promptophone game, seeded with a bank word."""

    __tablename__ = "prompt_chains"
    __table_args__ = (UniqueConstraint("game_id", "position", name="uq_game_chain_position"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    game_id: Mapped[int] = mapped_column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    # The originator, not necessarily the current contributor
    player_id: Mapped[str] = mapped_column(String(64), ForeignKey("players.id"), nullable=False)
    # Chain index; equals the originator's join order
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    original_word: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    game: Mapped["Game"] = relationship(  # type: ignore[name-defined]
        "Game", back_populates="prompt_chains"
    )
    steps: Mapped[list["ChainStep"]] = relationship(
        "ChainStep", back_populates="chain", lazy="select", order_by="ChainStep.round_number"
    )

    def step_by(self, player_id: str) -> "ChainStep | None":
        """Return the step contributed by ``player_id``, if any."""
        for step in self.steps:
            if step.player_id == player_id:
                return step
        return None

    def __repr__(self) -> str:
        return f"<PromptChain position={self.position} word={self.original_word} steps={len(self.steps)}>"


class ChainStep(db.Model):
    """A single prompt→image link appended to a chain during one round."""

    __tablename__ = "chain_steps"
    __table_args__ = (
        UniqueConstraint("chain_id", "player_id", name="uq_chain_step_player"),
        UniqueConstraint("chain_id", "round_number", name="uq_chain_step_round"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    chain_id: Mapped[int] = mapped_column(Integer, ForeignKey("prompt_chains.id"), nullable=False, index=True)
    player_id: Mapped[str] = mapped_column(String(64), ForeignKey("players.id"), nullable=False)
    image_id: Mapped[int] = mapped_column(Integer, ForeignKey("images.id"), nullable=False)
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)

    # Relationships
    chain: Mapped["PromptChain"] = relationship("PromptChain", back_populates="steps")
    image: Mapped["Image"] = relationship(  # type: ignore[name-defined]
        "Image", lazy="select"
    )

    def __repr__(self) -> str:
        return f"<ChainStep chain={self.chain_id} round={self.round_number} player={self.player_id}>"

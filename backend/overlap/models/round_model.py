"""
Round data model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from overlap.core.database import Base

class Round(Base):
    """Game round table, the source of truth for the current phase"""
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("game_id", "round_number", name="uq_rounds_game_round_number"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    prompt_id = Column(Integer, ForeignKey("prompts.id"), nullable=False)
    phase = Column(String(20), nullable=False, default="answering")  # answering, voting, results
    phase_started_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    game = relationship("Game")
    prompt = relationship("Prompt")

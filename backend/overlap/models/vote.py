"""
Vote data model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from overlap.core.database import Base

class Vote(Base):
    """Vote table, one immutable row per voter per round"""
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("game_id", "round_number", "voter_id", name="uq_votes_game_round_voter"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    voter_id = Column(String(36), ForeignKey("players.id"), nullable=False)
    voted_for_answer_id = Column(Integer, ForeignKey("answers.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    voter = relationship("Player", foreign_keys=[voter_id])
    answer = relationship("Answer", foreign_keys=[voted_for_answer_id])

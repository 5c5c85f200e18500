"""
Answer data model
"""

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from overlap.core.database import Base

class Answer(Base):
    """Answer table, one row per player per round"""
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("game_id", "round_number", "player_id", name="uq_answers_game_round_player"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    round_number = Column(Integer, nullable=False)
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False)
    answer_text = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    player = relationship("Player")

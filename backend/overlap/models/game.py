"""
Game data model
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from overlap.core.database import Base

class Game(Base):
    """Game room table"""
    __tablename__ = "games"
    
    id = Column(Integer, primary_key=True, index=True)
    room_code = Column(String(8), nullable=False, unique=True, index=True)
    status = Column(String(20), nullable=False, default="lobby")  # lobby, playing, finished
    current_round = Column(Integer, nullable=False, default=0)
    # Cached copy of the current round's phase; the rounds row is authoritative
    current_phase = Column(String(20), nullable=True)  # answering, voting, results
    phase_started_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    # Relationships
    players = relationship("Player", back_populates="game", order_by="Player.join_order")

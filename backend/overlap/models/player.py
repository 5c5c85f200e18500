"""
Player data model
"""

import uuid
from sqlalchemy import Column, Integer, String, ForeignKey, Boolean, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from overlap.core.database import Base

class Player(Base):
    """Player table"""
    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("game_id", "join_order", name="uq_players_game_join_order"),
    )
    
    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    game_id = Column(Integer, ForeignKey("games.id"), nullable=False, index=True)
    player_name = Column(String(20), nullable=False)   # trimmed display name
    join_order = Column(Integer, nullable=False)       # 1-based, contiguous per game
    is_connected = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    
    # Relationships
    game = relationship("Game", back_populates="players")

"""
Prompt data model
"""

from sqlalchemy import Column, Integer, String
from overlap.core.database import Base

class Prompt(Base):
    """Prompt table: two topics players must find the overlap of"""
    __tablename__ = "prompts"
    
    id = Column(Integer, primary_key=True, index=True)
    topic1 = Column(String(100), nullable=False)
    topic2 = Column(String(100), nullable=False)

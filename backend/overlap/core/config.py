"""
Application configuration
"""

from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings"""
    
    # Basics
    APP_NAME: str = "Overlap"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    
    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8001
    CORS_ORIGINS: List[str] = ["http://localhost:5173"]
    
    # Database
    DATABASE_URL: str = "sqlite:///./overlap.db"
    SEED_PROMPTS: bool = True
    
    # Room rules
    MAX_PLAYERS: int = 4  # a full room starts on its own
    MIN_PLAYERS: int = 1
    MAX_NAME_LENGTH: int = 20
    MAX_ANSWER_LENGTH: int = 50
    
    # Phase time limits (seconds)
    ANSWERING_SECONDS: int = 60
    VOTING_SECONDS: int = 30
    
    # Room codes
    ROOM_CODE_LENGTH: int = 4
    ROOM_CODE_ALPHABET: str = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"  # no 0/O/1/I/L
    ROOM_CODE_MAX_ATTEMPTS: int = 10
    
    class Config:
        env_file = ".env"
        case_sensitive = True

# Global settings instance
settings = Settings()

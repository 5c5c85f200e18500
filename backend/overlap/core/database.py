"""
Database configuration
"""
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from overlap.core.config import settings

logger = logging.getLogger(__name__)

# Default prompt pairs seeded into an empty prompts table
DEFAULT_PROMPTS = [
    ("Breakfast", "Outer space"),
    ("Pirates", "Office life"),
    ("Dogs", "Superheroes"),
    ("Winter", "Music festivals"),
    ("Dinosaurs", "Social media"),
    ("The beach", "Homework"),
    ("Robots", "Grandparents"),
    ("Pizza", "Haunted houses"),
]


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    echo=False  # set True to log SQL
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """Yield a database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    """Create all tables and seed prompts"""
    # Import every model so the metadata is complete
    from overlap.models.game import Game
    from overlap.models.player import Player
    from overlap.models.prompt import Prompt
    from overlap.models.round_model import Round
    from overlap.models.answer import Answer
    from overlap.models.vote import Vote

    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    if settings.SEED_PROMPTS:
        _seed_prompts(bind)

    logger.info("✅ Database initialised")

def _seed_prompts(bind):
    """Insert the default prompts when the table is empty"""
    from overlap.models.prompt import Prompt

    session = sessionmaker(bind=bind)()
    try:
        if session.query(Prompt).count() > 0:
            return
        for topic1, topic2 in DEFAULT_PROMPTS:
            session.add(Prompt(topic1=topic1, topic2=topic2))
        session.commit()
        logger.info("📦 Seeded %d default prompts", len(DEFAULT_PROMPTS))
    finally:
        session.close()

# Data models
from .game import Game
from .player import Player
from .prompt import Prompt
from .round_model import Round
from .answer import Answer
from .vote import Vote

__all__ = ["Game", "Player", "Prompt", "Round", "Answer", "Vote"]

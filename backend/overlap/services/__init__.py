# Game services
from .game_store import GameStore
from .room_code import RoomCodeAllocator
from .room_service import RoomService
from .phase_engine import PhaseEngine
from .answer_service import AnswerService
from .vote_service import VoteService

__all__ = ["GameStore", "RoomCodeAllocator", "RoomService", "PhaseEngine", "AnswerService", "VoteService"]

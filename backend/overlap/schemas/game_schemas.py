"""
Request/response schemas for the room endpoints
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List


class CamelModel(BaseModel):
    """Serialises with camelCase field names, accepts either form on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ── Requests ─────────────────────────────────────
# Fields are optional so missing values reach the services and are
# reported as InvalidInput (400) like every other validation failure.

class JoinRequest(CamelModel):
    """Join a room"""
    player_name: Optional[str] = Field(default=None, description="Display name, 1-20 characters")

class SubmitAnswerRequest(CamelModel):
    """Submit or revise an answer"""
    player_id: Optional[str] = None
    answer_text: Optional[str] = Field(default=None, description="Answer, 1-50 characters")

class VoteRequest(CamelModel):
    """Vote for another player's answer"""
    player_id: Optional[str] = None
    answer_id: Optional[int] = None


# ── Responses ────────────────────────────────────

class CreateRoomResponse(CamelModel):
    room_code: str

class JoinResponse(CamelModel):
    player_id: str
    player_name: str

class StartResponse(CamelModel):
    success: bool = True
    round_number: int
    phase: str

class RoomState(CamelModel):
    """Lobby polling snapshot"""
    status: str
    current_round: int
    player_count: int

class PlayerInfo(CamelModel):
    id: str
    player_name: str
    join_order: int
    is_connected: bool = True

class AdvanceResponse(CamelModel):
    """Result of an advance request; advanced is False when another request won the race"""
    success: bool = True
    advanced: bool = True
    previous_phase: str
    new_phase: str
    phase_started_at: str

class CurrentPrompt(CamelModel):
    prompt_id: int
    topic1: str
    topic2: str
    round_number: int
    phase: str
    time_remaining: int
    submitted_count: int

class Ack(CamelModel):
    success: bool = True

class AnswerAck(Ack):
    answer_id: int

class VotableAnswer(CamelModel):
    id: int
    text: str
    author_display_name: str

class VotableAnswers(CamelModel):
    answers: List[VotableAnswer]
    has_voted: bool

class AnswerResult(CamelModel):
    answer_id: int
    text: str
    author_display_name: str
    votes: int

class RoundResults(CamelModel):
    round_number: int
    phase: str
    results: List[AnswerResult]

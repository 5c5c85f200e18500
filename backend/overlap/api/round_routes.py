"""
Round play API routes: phases, answers and votes
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from overlap.core.database import get_db
from overlap.api.deps import get_clock
from overlap.services.phase_engine import PhaseEngine
from overlap.services.answer_service import AnswerService
from overlap.services.vote_service import VoteService
from overlap.schemas.game_schemas import (
    Ack,
    AdvanceResponse,
    AnswerAck,
    CurrentPrompt,
    RoundResults,
    SubmitAnswerRequest,
    VotableAnswers,
    VoteRequest,
)

router = APIRouter()

@router.post("/{room_code}/advance-phase", response_model=AdvanceResponse)
async def advance_phase(
    room_code: str,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Advance the current round once its phase time is up"""
    phase_engine = PhaseEngine(db, clock=clock)
    return await phase_engine.request_advance(room_code)

@router.get("/{room_code}/current-prompt", response_model=CurrentPrompt)
async def current_prompt(
    room_code: str,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Prompt, phase and remaining time of the current round"""
    phase_engine = PhaseEngine(db, clock=clock)
    return await phase_engine.current_prompt(room_code)

@router.post("/{room_code}/submit-answer", response_model=AnswerAck)
async def submit_answer(
    room_code: str,
    request: SubmitAnswerRequest,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Submit or revise an answer"""
    answer_service = AnswerService(db, clock=clock)
    return await answer_service.submit(room_code, request.player_id, request.answer_text)

@router.get("/{room_code}/answers", response_model=VotableAnswers)
async def list_votable_answers(
    room_code: str,
    player_id: Optional[str] = Query(default=None, alias="playerId"),
    db: Session = Depends(get_db)
):
    """Answers the player can vote for"""
    vote_service = VoteService(db)
    return await vote_service.list_votable(room_code, player_id)

@router.post("/{room_code}/vote", response_model=Ack)
async def cast_vote(
    room_code: str,
    request: VoteRequest,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Vote for another player's answer"""
    vote_service = VoteService(db, clock=clock)
    return await vote_service.cast_vote(room_code, request.player_id, request.answer_id)

@router.get("/{room_code}/results", response_model=RoundResults)
async def round_results(
    room_code: str,
    db: Session = Depends(get_db)
):
    """Vote tally of the current round"""
    vote_service = VoteService(db)
    return await vote_service.results(room_code)

"""
Room lifecycle API routes
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from overlap.core.database import get_db
from overlap.api.deps import get_clock
from overlap.services.room_service import RoomService
from overlap.schemas.game_schemas import (
    CreateRoomResponse,
    JoinRequest,
    JoinResponse,
    PlayerInfo,
    RoomState,
    StartResponse,
)

router = APIRouter()

@router.post("/create", response_model=CreateRoomResponse)
async def create_room(
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Create a new room in the lobby"""
    room_service = RoomService(db, clock=clock)
    return await room_service.create_room()

@router.post("/{room_code}/join", response_model=JoinResponse)
async def join_room(
    room_code: str,
    request: JoinRequest,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Join a room; the fourth player starts the game"""
    room_service = RoomService(db, clock=clock)
    return await room_service.join(room_code, request.player_name)

@router.post("/{room_code}/start", response_model=StartResponse)
async def start_game(
    room_code: str,
    db: Session = Depends(get_db),
    clock=Depends(get_clock)
):
    """Start the game with the players already in the room"""
    room_service = RoomService(db, clock=clock)
    return await room_service.start(room_code)

@router.get("/{room_code}/state", response_model=RoomState)
async def get_room_state(
    room_code: str,
    player_id: Optional[str] = Query(default=None, alias="playerId"),
    db: Session = Depends(get_db)
):
    """Lobby status, round and player count"""
    room_service = RoomService(db)
    return await room_service.get_state(room_code, player_id)

@router.get("/{room_code}/players", response_model=List[PlayerInfo])
async def list_players(
    room_code: str,
    db: Session = Depends(get_db)
):
    """Players in join order"""
    room_service = RoomService(db)
    return await room_service.list_players(room_code)

"""
Room lifecycle: creating rooms, admitting players and starting the game
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from overlap.core.config import settings
from overlap.core.errors import (
    AllocationExhaustedError,
    AlreadyStartedError,
    InsufficientPlayersError,
    InvalidInputError,
    JoinConflictError,
    NoPromptsError,
    NotFoundError,
    RoomFullError,
    TooManyPlayersError,
)
from overlap.core.phase_clock import ANSWERING
from overlap.models.prompt import Prompt
from overlap.schemas.game_schemas import (
    CreateRoomResponse,
    JoinResponse,
    PlayerInfo,
    RoomState,
    StartResponse,
)
from overlap.services.base_service import BaseGameService
from overlap.services.room_code import RoomCodeAllocator

logger = logging.getLogger(__name__)


class RoomService(BaseGameService):
    """Lobby -> playing transition"""

    async def create_room(self) -> CreateRoomResponse:
        """Create a game in the lobby under a fresh room code"""
        room_code = RoomCodeAllocator(self.store, rng=self.rng).allocate()
        try:
            self.store.create_game(room_code)
            self.store.commit()
        except IntegrityError:
            # Another request claimed the same code between check and insert
            raise AllocationExhaustedError("Room code was taken concurrently, please retry")

        logger.info("🎮 Room created: %s", room_code)
        return CreateRoomResponse(room_code=room_code)

    async def join(self, room_code: str, player_name: Optional[str]) -> JoinResponse:
        """Admit a player; the join that fills the room starts round 1"""
        name = (player_name or "").strip()
        if not name:
            raise InvalidInputError("Player name is required")
        if len(name) > settings.MAX_NAME_LENGTH:
            raise InvalidInputError(f"Player name must be {settings.MAX_NAME_LENGTH} characters or less")

        game = self._get_game(room_code)
        game_id = game.id

        count = self.store.count_players(game_id)
        if count >= settings.MAX_PLAYERS:
            raise RoomFullError(f"Game is full ({settings.MAX_PLAYERS}/{settings.MAX_PLAYERS} players)")

        if game.status != "lobby":
            raise AlreadyStartedError("Game has already started")

        # A concurrent start may have left the lobby since the read above
        if not self.store.hold_lobby(game_id):
            self.store.rollback()
            raise AlreadyStartedError("Game has already started")

        try:
            player = self.store.insert_player(game_id, name, count + 1)
            player_id, player_name = player.id, player.player_name

            if count + 1 == settings.MAX_PLAYERS:
                prompt = self.store.list_prompts_random_pick(self.rng)
                if prompt is None:
                    logger.warning("⚠️ Room %s is full but has no prompts; staying in lobby", room_code)
                else:
                    self._open_first_round(game_id, prompt, self.clock())
                    logger.info("🚀 Room %s is full, game auto-started", room_code)

            self.store.commit()
        except IntegrityError:
            raise JoinConflictError()

        logger.info("👤 %s joined room %s as #%d", name, room_code, count + 1)
        return JoinResponse(player_id=player_id, player_name=player_name)

    async def start(self, room_code: str) -> StartResponse:
        """Explicitly start the game with the players already in the room"""
        game = self._get_game(room_code)
        game_id = game.id

        if game.status != "lobby":
            raise AlreadyStartedError()

        count = self.store.count_players(game_id)
        if count < settings.MIN_PLAYERS:
            raise InsufficientPlayersError(f"Need at least {settings.MIN_PLAYERS} player to start")
        if count > settings.MAX_PLAYERS:
            raise TooManyPlayersError()

        prompt = self.store.list_prompts_random_pick(self.rng)
        if prompt is None:
            raise NoPromptsError()

        try:
            self._open_first_round(game_id, prompt, self.clock())
            self.store.commit()
        except IntegrityError:
            raise AlreadyStartedError()

        logger.info("🚀 Room %s started with %d players", room_code, count)
        return StartResponse(round_number=1, phase=ANSWERING)

    def _open_first_round(self, game_id: int, prompt: Prompt, now: datetime) -> None:
        """Create round 1 and flip the game to playing, in the caller's transaction.

        The round row goes first. Raises AlreadyStartedError if the game left
        the lobby in the meantime.
        """
        self.store.insert_round(game_id, 1, prompt.id, ANSWERING, now)
        if not self.store.mark_game_started(game_id, ANSWERING, now):
            self.store.rollback()
            raise AlreadyStartedError()

    async def get_state(self, room_code: str, player_id: Optional[str] = None) -> RoomState:
        """Lobby polling snapshot; checks membership when a player id is given"""
        game = self._get_game(room_code)
        count = self.store.count_players(game.id)

        if player_id and not self.store.get_player(game.id, player_id):
            raise NotFoundError("Player not found in this game")

        return RoomState(
            status=game.status,
            current_round=game.current_round,
            player_count=count,
        )

    async def list_players(self, room_code: str) -> List[PlayerInfo]:
        """Players in join order"""
        game = self._get_game(room_code)
        return [PlayerInfo.model_validate(p) for p in self.store.list_players(game.id)]

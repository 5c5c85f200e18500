"""
Shared lookups for the room services
"""

import random
from typing import Callable, Tuple
from datetime import datetime
from sqlalchemy.orm import Session

from overlap.core.errors import NotFoundError, NotPlayingError
from overlap.core.utils import utcnow
from overlap.models.game import Game
from overlap.models.round_model import Round
from overlap.services.game_store import GameStore


class BaseGameService:
    """Holds the store, the clock and the random source for one request"""

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow, rng=random):
        self.db = db
        self.store = GameStore(db)
        self.clock = clock
        self.rng = rng

    def _get_game(self, room_code: str) -> Game:
        game = self.store.get_game_by_room_code(room_code)
        if not game:
            raise NotFoundError("Game not found")
        return game

    def _get_current_round(self, room_code: str) -> Tuple[Game, Round]:
        """Game plus its current round; the round row is authoritative for the phase"""
        game = self._get_game(room_code)
        if game.status != "playing":
            raise NotPlayingError()

        round_obj = self.store.get_round(game.id, game.current_round)
        if not round_obj:
            raise NotFoundError("Round not found")
        return game, round_obj

"""
Room code allocation
"""

import logging
import random
from typing import Optional

from overlap.core.config import settings
from overlap.core.errors import AllocationExhaustedError
from overlap.services.game_store import GameStore

logger = logging.getLogger(__name__)


def generate_room_code(rng=random, alphabet: Optional[str] = None, length: Optional[int] = None) -> str:
    """Draw one short, easy-to-type room code"""
    if alphabet is None:
        alphabet = settings.ROOM_CODE_ALPHABET
    if length is None:
        length = settings.ROOM_CODE_LENGTH
    return "".join(rng.choice(alphabet) for _ in range(length))


class RoomCodeAllocator:
    """Hands out room codes not used by any existing game.

    Only reads the store; the caller inserts the game with the returned code.
    """

    def __init__(self, store: GameStore, rng=random, max_attempts: Optional[int] = None):
        self.store = store
        self.rng = rng
        self.max_attempts = settings.ROOM_CODE_MAX_ATTEMPTS if max_attempts is None else max_attempts

    def allocate(self) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = generate_room_code(self.rng)
            if not self.store.room_code_exists(code):
                return code
            logger.debug("Room code %s taken (attempt %d/%d)", code, attempt, self.max_attempts)

        logger.error("❌ No free room code after %d attempts", self.max_attempts)
        raise AllocationExhaustedError()

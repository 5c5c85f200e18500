"""
Answer ledger: one answer per player per round, latest submission wins
"""

import logging
from typing import Optional

from overlap.core.config import settings
from overlap.core.errors import InvalidInputError, NotFoundError, WrongPhaseError
from overlap.core.phase_clock import ANSWERING
from overlap.schemas.game_schemas import AnswerAck
from overlap.services.base_service import BaseGameService

logger = logging.getLogger(__name__)


class AnswerService(BaseGameService):

    async def submit(self, room_code: str, player_id: Optional[str], answer_text: Optional[str]) -> AnswerAck:
        """Submit or revise the player's answer while the round is answering"""
        if not player_id or answer_text is None:
            raise InvalidInputError("Missing required fields")

        text = answer_text.strip()
        if not text:
            raise InvalidInputError("Answer cannot be empty")
        if len(text) > settings.MAX_ANSWER_LENGTH:
            raise InvalidInputError(f"Answer too long (max {settings.MAX_ANSWER_LENGTH} characters)")

        game, round_obj = self._get_current_round(room_code)
        if round_obj.phase != ANSWERING:
            raise WrongPhaseError("Not in answering phase")

        if not self.store.get_player(game.id, player_id):
            raise NotFoundError("Player not found in this game")

        # A concurrent advance may have closed answering since the read above
        if not self.store.hold_round_phase(game.id, round_obj.round_number, ANSWERING):
            self.store.rollback()
            raise WrongPhaseError("Not in answering phase")

        answer = self.store.upsert_answer(game.id, round_obj.round_number, player_id, text)
        answer_id = answer.id
        self.store.commit()

        logger.debug("Answer %d stored for player %s in room %s", answer_id, player_id, room_code)
        return AnswerAck(answer_id=answer_id)

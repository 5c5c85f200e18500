"""
Phase engine: the answering -> voting -> results state machine of a round.

Nothing runs in the background. Whichever request arrives after a phase's
deadline performs the transition, guarded by a compare-and-set on the round
row so concurrent callers commit at most one transition.
"""

import logging

from overlap.core.config import settings
from overlap.core.errors import (
    AlreadyAtTerminalPhaseError,
    NotFoundError,
    PhaseNotExpiredError,
    StoreFailure,
    WrongPhaseError,
)
from overlap.core.phase_clock import ANSWERING, RESULTS, VOTING, PhaseTiming, phase_timing
from overlap.core.utils import format_timestamp_with_timezone
from overlap.models.game import Game
from overlap.models.round_model import Round
from overlap.schemas.game_schemas import AdvanceResponse, CurrentPrompt
from overlap.services.base_service import BaseGameService

logger = logging.getLogger(__name__)


class PhaseEngine(BaseGameService):
    """Validates and performs phase transitions, reports phase snapshots"""

    def _timing(self, round_obj: Round) -> PhaseTiming:
        return phase_timing(
            round_obj.phase,
            round_obj.phase_started_at,
            self.clock(),
            answering_seconds=settings.ANSWERING_SECONDS,
            voting_seconds=settings.VOTING_SECONDS,
        )

    def _next_phase(self, game: Game, round_obj: Round) -> str:
        current = round_obj.phase
        if current == ANSWERING:
            answer_count = self.store.count_answers(game.id, round_obj.round_number)
            if answer_count <= 1:
                # Nothing to vote between
                logger.info("Room %s has %d answer(s), skipping voting", game.room_code, answer_count)
                return RESULTS
            return VOTING
        if current == VOTING:
            return RESULTS
        raise WrongPhaseError(f"Unknown phase: {current}")

    async def request_advance(self, room_code: str) -> AdvanceResponse:
        """Move the current round to its next phase once its time is up"""
        game, round_obj = self._get_current_round(room_code)
        game_id, room, round_number = game.id, game.room_code, round_obj.round_number
        current = round_obj.phase

        if current == RESULTS:
            raise AlreadyAtTerminalPhaseError()

        timing = self._timing(round_obj)
        if not timing.expired:
            raise PhaseNotExpiredError(timing.remaining)

        # Hold the round row before counting answers so no submission lands in between
        if not self.store.hold_round_phase(game_id, round_number, current):
            self.store.rollback()
            return self._lost_race(game_id, room, round_number, current)

        next_phase = self._next_phase(game, round_obj)
        now = self.clock()

        # Round row first: it is the source of truth
        if not self.store.update_round_phase(game_id, round_number, current, next_phase, now):
            self.store.rollback()
            return self._lost_race(game_id, room, round_number, current)

        if not self.store.update_game_phase(game_id, current, next_phase, now):
            logger.warning("⚠️ Game row of room %s did not match phase %s, round row wins", room, current)

        self.store.commit()
        logger.info("⏭️ Room %s round %d: %s -> %s", room, round_number, current, next_phase)

        return AdvanceResponse(
            previous_phase=current,
            new_phase=next_phase,
            phase_started_at=format_timestamp_with_timezone(now),
        )

    def _lost_race(self, game_id: int, room_code: str, round_number: int, expected: str) -> AdvanceResponse:
        """Another request advanced first; report what is current now"""
        fresh = self.store.get_round(game_id, round_number)
        if not fresh:
            raise NotFoundError("Round not found")

        logger.warning("Room %s: advance from %s already done by a concurrent request", room_code, expected)
        return AdvanceResponse(
            advanced=False,
            previous_phase=expected,
            new_phase=fresh.phase,
            phase_started_at=format_timestamp_with_timezone(fresh.phase_started_at),
        )

    async def current_prompt(self, room_code: str) -> CurrentPrompt:
        """Read-only snapshot of the current round for polling clients"""
        game, round_obj = self._get_current_round(room_code)

        prompt = round_obj.prompt
        if not prompt:
            raise NotFoundError("Prompt not found")

        snapshot = dict(
            prompt_id=prompt.id,
            topic1=prompt.topic1,
            topic2=prompt.topic2,
            round_number=round_obj.round_number,
            phase=round_obj.phase,
            time_remaining=self._timing(round_obj).remaining,
        )

        try:
            submitted = self.store.count_answers(game.id, round_obj.round_number)
        except StoreFailure as e:
            logger.warning("Answer count unavailable for room %s: %s", room_code, e)
            submitted = 0

        return CurrentPrompt(submitted_count=submitted, **snapshot)
